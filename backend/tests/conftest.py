import httpx
import pytest
from fastapi.testclient import TestClient

from docuextract_analytics.core.gateway.client import GatewayClient
from docuextract_analytics.main import app
from docuextract_analytics.modules.analytics.router import get_gateway_client

GATEWAY_URL = "http://gateway.test"

USAGE = {
    "pages": 100,
    "requests": 20,
    "currentDiscount": 5,
    "nextTierThreshold": 500,
    "progressToNextTier": 0.2,
}
PROVIDERS = {
    "providers": [
        {"name": "A", "enabled": True, "pricePerPage": 0.01, "routingPriority": 1},
    ]
}
PRICING = {"volumeDiscounts": [{"threshold": 500, "discount": 10}]}


def make_gateway_handler(
    usage: dict | None = None,
    providers: dict | None = None,
    pricing: dict | None = None,
    failures: dict[str, int] | None = None,
    errors: dict[str, Exception] | None = None,
    calls: list[str] | None = None,
):
    """Build a MockTransport handler that serves the three gateway documents.

    ``failures`` maps a request path to the status code it should answer with;
    ``errors`` maps a request path to an exception the transport raises.
    """
    failures = failures or {}
    errors = errors or {}
    documents = {
        "/api/providers": PROVIDERS if providers is None else providers,
        "/api/pricing": PRICING if pricing is None else pricing,
    }

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if calls is not None:
            calls.append(path)
        if path in errors:
            raise errors[path]
        if path in failures:
            return httpx.Response(failures[path], json={"error": "boom"})
        if path.startswith("/api/usage/"):
            return httpx.Response(200, json=USAGE if usage is None else usage)
        if path in documents:
            return httpx.Response(200, json=documents[path])
        return httpx.Response(404, json={"error": "not found"})

    return handler


def make_gateway_client(**kwargs) -> GatewayClient:
    return GatewayClient(
        gateway_url=GATEWAY_URL,
        transport=httpx.MockTransport(make_gateway_handler(**kwargs)),
    )


@pytest.fixture()
def gateway_calls():
    return []


@pytest.fixture()
def gateway_failures():
    return {}


@pytest.fixture()
def gateway_errors():
    return {}


@pytest.fixture()
def gateway_payloads():
    """Per-test overrides for the usage, providers and pricing documents."""
    return {}


@pytest.fixture()
def client(gateway_calls, gateway_failures, gateway_errors, gateway_payloads):
    async def override_get_gateway_client():
        gateway = make_gateway_client(
            calls=gateway_calls,
            failures=gateway_failures,
            errors=gateway_errors,
            **gateway_payloads,
        )
        try:
            yield gateway
        finally:
            await gateway.aclose()

    app.dependency_overrides[get_gateway_client] = override_get_gateway_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def usage_payload():
    return dict(USAGE)


@pytest.fixture()
def providers_payload():
    return {"providers": [dict(p) for p in PROVIDERS["providers"]]}


@pytest.fixture()
def pricing_payload():
    return {"volumeDiscounts": [dict(t) for t in PRICING["volumeDiscounts"]]}


@pytest.fixture()
def gateway_factory():
    return make_gateway_client
