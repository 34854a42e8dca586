from __future__ import annotations

import logging
from typing import Callable

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from config import get_settings, parse_limit

from ..errors import RateLimited
from ..routes_metrics import ingress_rate_limited_total
from ..security.ratelimit import guard, limiter_key
from ..utils.responses import rate_limited

logger = logging.getLogger("orderflow.ingress")

GUARDED_PATHS = {"/g/order": "order"}


class IngressRateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding window limiter for guest order submission.

    The client identity is the tenant header plus the client IP. Without a
    Redis client on ``app.state.redis`` (or when Redis errors) requests pass.
    """

    def __init__(self, app: Callable) -> None:
        super().__init__(app)
        self.limit, self.window = parse_limit(get_settings().order_rate_limit)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[override]
        scope = GUARDED_PATHS.get(request.url.path)
        if scope is None or request.method != "POST":
            return await call_next(request)
        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)
        ip = request.client[0] if request.client else "unknown"
        tenant = (
            request.headers.get("X-Tenant-ID")
            or request.headers.get("X-Tenant-Slug")
            or "-"
        )
        try:
            await guard(redis, limiter_key(scope, tenant, ip), self.limit, self.window)
        except RateLimited as exc:
            ingress_rate_limited_total.inc()
            return rate_limited(exc.retry_after)
        except RedisError:
            logger.warning("rate limiter unavailable", extra={"tenant": tenant})
        return await call_next(request)
