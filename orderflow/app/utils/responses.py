from typing import Any, Dict

from fastapi.responses import JSONResponse
from starlette.status import HTTP_429_TOO_MANY_REQUESTS


def ok(data: Any) -> Dict[str, Any]:
    """Return a success envelope."""
    return {"ok": True, "data": data}


def err(
    code: int | str,
    message: str,
    details: Any = None,
    hint: str | None = None,
) -> Dict[str, Any]:
    """Return an error envelope."""
    from ..middlewares.request_id import request_id_ctx

    error: Dict[str, Any] = {"code": code, "message": message}
    if hint:
        error["hint"] = hint
    if details:
        error["details"] = details

    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error}


def rate_limited(retry_after: int) -> JSONResponse:
    """Return a standardized rate limit response."""
    retry_after = max(retry_after, 0)
    body = err("RATE_LIMIT", "RateLimitExceeded", hint=f"retry in {retry_after}s")
    return JSONResponse(
        body,
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(retry_after)},
    )
