from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.api.middleware.request_log import RequestLogMiddleware
from portfolio_api.api.routers.portfolio import router as portfolio_router
from portfolio_api.api.routers.prices import router as prices_router
from portfolio_api.api.routers.system import API_TITLE, router as system_router
from portfolio_api.api.routers.wallets import router as wallets_router
from portfolio_api.api.schemas.common import ErrorResponse, NotFoundResponse
from portfolio_api.shared.clock import isoformat, utc_now
from portfolio_api.shared.config import get_settings
from portfolio_api.shared.logging_setup import configure_logging


logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=API_TITLE, version=settings.app_version)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details, timestamp=isoformat(utc_now()))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        body = NotFoundResponse(
            error="Not found",
            path=request.url.path,
            method=request.method,
            suggestion="Check /api/docs for available endpoints",
            timestamp=isoformat(utc_now()),
        )
        return JSONResponse(status_code=404, content=body.model_dump(by_alias=True, exclude_none=True))
    if exc.status_code >= 500:
        logger.error(
            "api: upstream_error method=%s path=%s status=%s detail=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.detail,
        )
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    return _error(400, "Invalid request", details)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api: unhandled_error method=%s path=%s", request.method, request.url.path)
    return _error(500, "Internal server error")


app.include_router(wallets_router, prefix="/api/wallets", tags=["wallets"])
# Legacy path kept for older frontends.
app.include_router(wallets_router, prefix="/api/wallet", include_in_schema=False)
app.include_router(prices_router, prefix="/api/prices", tags=["prices"])
app.include_router(portfolio_router, prefix="/api/portfolio", tags=["portfolio"])
app.include_router(system_router, prefix="/api", tags=["system"])


def run() -> None:
    import uvicorn

    uvicorn.run("portfolio_api.main:app", host="0.0.0.0", port=settings.port)
