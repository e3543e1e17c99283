from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Request
from fastapi.routing import APIRoute

from portfolio_api.api.deps import get_check_upstreams_use_case
from portfolio_api.api.schemas.system import (
    DocsResponse,
    EndpointDoc,
    HealthResponse,
    PingResponse,
    UpstreamCheckResponse,
)
from portfolio_api.api.serializers import iso
from portfolio_api.application.use_cases.check_upstreams import CheckUpstreamsUseCase
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.config import get_settings

router = APIRouter()

API_TITLE = "Crypto Portfolio Tracker API"

_started = time.monotonic()


@router.get("/test", response_model=PingResponse)
def ping():
    """Basic API test."""
    return PingResponse(
        message="API is working!",
        version=get_settings().app_version,
        timestamp=iso(utc_now()),
    )


@router.get("/health", response_model=HealthResponse)
def health():
    """Health check."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        uptime_seconds=round(time.monotonic() - _started, 3),
        version=settings.app_version,
        environment=settings.app_env,
        timestamp=iso(utc_now()),
    )


@router.get("/docs", response_model=DocsResponse)
def api_docs(request: Request):
    """This documentation."""
    endpoints: list[EndpointDoc] = []
    for route in request.app.routes:
        if not isinstance(route, APIRoute) or not route.include_in_schema:
            continue
        if not route.path.startswith("/api/"):
            continue
        description = (route.description or route.name).strip().splitlines()[0]
        for method in sorted(route.methods):
            endpoints.append(EndpointDoc(method=method, path=route.path, description=description))
    return DocsResponse(
        title=API_TITLE,
        version=get_settings().app_version,
        endpoints=endpoints,
        timestamp=iso(utc_now()),
    )


@router.get("/test-apis", response_model=UpstreamCheckResponse)
def check_upstreams(
    use_case: CheckUpstreamsUseCase = Depends(get_check_upstreams_use_case),
):
    """Test all external APIs."""
    result = use_case.execute()
    return UpstreamCheckResponse(
        coingecko=result.coingecko,
        ethereum_rpc=result.ethereum_rpc,
        solana_rpc=result.solana_rpc,
        timestamp=iso(result.timestamp),
    )
