"""Per-client rate limits (slowapi) guarding the Gemini quota.

Only routes decorated with ``@limiter.limit(RATE_LIMITS[...])`` are
limited. Counters are kept in memory, per process.
"""

from typing import Any, FrozenSet

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

DEFAULT_RETRY_AFTER = 60

RATE_LIMITS = {
    "chat": "20/minute",      # one Gemini round-trip per message
    "analyze": "60/minute",   # classification and repair, no model call
}


def _trusted_proxies() -> FrozenSet[str]:
    from study_assistant.config import get_settings

    raw = get_settings().trusted_proxies
    return frozenset(ip.strip() for ip in raw.split(",") if ip.strip())


def get_client_ip(request: Request) -> str:
    """Key for the limiter.

    X-Forwarded-For is honoured only when the direct peer is a trusted
    proxy; otherwise any client could pick its own bucket.
    """
    peer: str = get_remote_address(request)
    if peer not in _trusted_proxies():
        return peer

    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or peer


limiter = Limiter(key_func=get_client_ip, default_limits=["200/minute"])


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 with Retry-After and X-RateLimit-* headers."""
    retry_after = getattr(exc, "retry_after", DEFAULT_RETRY_AFTER)
    headers = {
        "Retry-After": str(retry_after),
        "X-RateLimit-Remaining": "0",
    }
    limit = getattr(exc, "detail", None)
    if limit:
        headers["X-RateLimit-Limit"] = str(limit)

    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded",
            "message": f"Too many requests. Please retry after {retry_after} seconds.",
            "retry_after": retry_after,
        },
        headers=headers,
    )


def get_limiter() -> Any:
    return limiter
