"""DocuExtract gateway HTTP client.

Fetches usage, provider and pricing documents from the gateway and hands
them to the report aggregator. Transport errors (timeouts, connection
failures, non-2xx responses) are raised as the underlying ``httpx`` error.
"""
import asyncio
import logging
from urllib.parse import quote

import httpx

from docuextract_analytics.core.config import settings
from docuextract_analytics.modules.analytics.schemas import (
    PricingInfo,
    ProviderBreakdown,
    ProviderList,
    Report,
    UsageRecord,
)
from docuextract_analytics.modules.analytics.service import (
    generate_report,
    get_provider_breakdown,
    to_csv,
)

logger = logging.getLogger(__name__)

USAGE_PATH = "/api/usage/{client_id}"
PROVIDERS_PATH = "/api/providers"
PRICING_PATH = "/api/pricing"


class GatewayClient:
    to_csv = staticmethod(to_csv)

    def __init__(
        self,
        gateway_url: str | None = None,
        request_timeout_ms: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.gateway_url = (gateway_url or settings.gateway_base_url).rstrip("/")
        if request_timeout_ms is None:
            self.timeout_seconds = settings.gateway_timeout_seconds
        else:
            self.timeout_seconds = request_timeout_ms / 1000.0
        self._client = httpx.AsyncClient(
            base_url=self.gateway_url,
            timeout=self.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str):
        try:
            resp = await self._client.get(path)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Gateway request GET %s failed: %s", path, exc)
            raise
        return resp.json()

    async def fetch_usage(self, client_id: str = "default") -> UsageRecord:
        data = await self._get_json(USAGE_PATH.format(client_id=quote(client_id, safe="")))
        return UsageRecord.model_validate(data)

    async def fetch_providers(self) -> ProviderList:
        data = await self._get_json(PROVIDERS_PATH)
        return ProviderList.model_validate(data)

    async def fetch_pricing(self) -> PricingInfo:
        data = await self._get_json(PRICING_PATH)
        return PricingInfo.model_validate(data)

    async def get_report(self, client_id: str = "default") -> Report:
        """Fetch the three gateway documents concurrently and aggregate them.

        The first failing request fails the whole report; no partial report
        is ever returned.
        """
        logger.debug("Fetching report documents for client %s from %s", client_id, self.gateway_url)
        usage, providers, pricing = await asyncio.gather(
            self.fetch_usage(client_id),
            self.fetch_providers(),
            self.fetch_pricing(),
        )
        return generate_report(usage, providers, pricing)

    async def get_provider_breakdown(self) -> ProviderBreakdown:
        providers = await self.fetch_providers()
        return get_provider_breakdown(providers)
