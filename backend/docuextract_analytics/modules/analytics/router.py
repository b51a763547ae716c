import logging
from collections.abc import AsyncGenerator

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from docuextract_analytics.core.config import settings
from docuextract_analytics.core.gateway.client import GatewayClient
from docuextract_analytics.modules.analytics.schemas import ProviderBreakdown, Report
from docuextract_analytics.modules.analytics.service import to_csv

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analytics"], prefix="/v1/analytics")


async def get_gateway_client() -> AsyncGenerator[GatewayClient, None]:
    client = GatewayClient()
    try:
        yield client
    finally:
        await client.aclose()


def _gateway_error(exc: Exception) -> HTTPException:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        logger.warning("Gateway returned %d for %s", status, exc.request.url)
        return HTTPException(status_code=502, detail=f"Gateway returned {status}")
    if isinstance(exc, httpx.TimeoutException):
        logger.warning("Gateway request timed out: %s", exc)
        return HTTPException(status_code=504, detail="Gateway request timed out")
    if isinstance(exc, ValidationError):
        logger.warning("Malformed gateway payload: %s", exc)
        return HTTPException(status_code=502, detail="Malformed gateway payload")
    logger.warning("Gateway request failed: %s", exc)
    return HTTPException(status_code=502, detail="Gateway request failed")


async def _load_report(client: GatewayClient, client_id: str) -> Report:
    try:
        return await client.get_report(client_id)
    except (httpx.HTTPError, ValidationError) as exc:
        raise _gateway_error(exc) from exc


@router.get("/report", response_model=Report)
async def get_default_report_endpoint(client: GatewayClient = Depends(get_gateway_client)):
    return await _load_report(client, settings.DEFAULT_CLIENT_ID)


@router.get("/report/{client_id}", response_model=Report)
async def get_report_endpoint(
    client_id: str,
    client: GatewayClient = Depends(get_gateway_client),
):
    return await _load_report(client, client_id)


@router.get("/report/{client_id}/csv", response_class=PlainTextResponse)
async def get_report_csv_endpoint(
    client_id: str,
    client: GatewayClient = Depends(get_gateway_client),
):
    report = await _load_report(client, client_id)
    return PlainTextResponse(
        to_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="report-{client_id}.csv"'},
    )


@router.get("/providers", response_model=ProviderBreakdown)
async def get_provider_breakdown_endpoint(client: GatewayClient = Depends(get_gateway_client)):
    try:
        return await client.get_provider_breakdown()
    except (httpx.HTTPError, ValidationError) as exc:
        raise _gateway_error(exc) from exc
