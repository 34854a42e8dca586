from .logging import LoggingMiddleware
from .rate_limit import IngressRateLimitMiddleware
from .request_id import RequestIdMiddleware

__all__ = ["LoggingMiddleware", "IngressRateLimitMiddleware", "RequestIdMiddleware"]
