"""FastAPI application factory.

``create_app`` wires middlewares, exception handlers and routers; the module
level ``app`` is what ASGI servers import.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.asyncio import from_url
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from . import db
from .errors import PipelineError
from .middlewares import IngressRateLimitMiddleware, LoggingMiddleware, RequestIdMiddleware
from .obs import init_sentry
from .obs.logging import configure_logging
from .routes_coupons import router as coupons_router
from .routes_guest_order import router as guest_order_router
from .routes_metrics import router as metrics_router
from .routes_stock_alerts import router as stock_alerts_router
from .utils.responses import err

logger = logging.getLogger("api")


def _tenant_header(request: Request):
    return request.headers.get("X-Tenant-ID") or request.headers.get("X-Tenant-Slug")


async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.warning(
        exc.message,
        extra={
            "status": exc.status_code,
            "route": request.url.path,
            "tenant": _tenant_header(request),
        },
    )
    return JSONResponse(
        err(exc.code, exc.message, exc.details, exc.hint),
        status_code=exc.status_code,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "error": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        err("INVALID_INPUT", "Invalid request", details), status_code=400
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        exc.detail,
        extra={
            "status": exc.status_code,
            "route": request.url.path,
            "tenant": _tenant_header(request),
        },
    )
    return JSONResponse(
        err(exc.status_code, str(exc.detail)), status_code=exc.status_code
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.db_create_all:
        await db.init_models()
    yield
    redis = getattr(app.state, "redis", None)
    if redis is not None:
        await redis.aclose()
    await db.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
    init_sentry(settings.error_dsn, env=settings.env)

    app = FastAPI(title="Orderflow API", version="1.0.0", lifespan=lifespan)
    app.state.redis = (
        from_url(settings.redis_url, decode_responses=True)
        if settings.redis_url
        else None
    )
    # last added runs first: request id, then logging, then the ingress limiter
    app.add_middleware(IngressRateLimitMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(guest_order_router)
    app.include_router(coupons_router)
    app.include_router(stock_alerts_router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    return app


app = create_app()
