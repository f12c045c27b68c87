"""One JSON log line per HTTP request.

Bodies are never logged: they carry user questions and model answers.
The routing headers set by the chat endpoint are copied into the line so
the educational/casual split and fallback usage can be read from logs.
"""

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from study_assistant.middleware.request_id import resolve_request_id

logger = logging.getLogger(__name__)

ROUTING_HEADERS = {
    "X-Educational-Query": "educational_query",
    "X-Template-Repaired": "template_repaired",
    "X-Model-Used": "model_used",
}


def configure_logging(level: str = "INFO") -> None:
    """Bare-message stdout logging; request lines are JSON already."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, latency and routing decisions as JSON."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = getattr(request.state, "request_id", None)
        if not request_id:
            request_id = resolve_request_id(request.headers.get("X-Request-ID", ""))
            request.state.request_id = request_id

        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "user_ip": request.client.host if request.client else "unknown",
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            entry.update(
                status_code=500,
                processing_time_ms=_elapsed_ms(started),
                error=str(e),
                error_type=type(e).__name__,
            )
            logger.error(json.dumps(entry), exc_info=True)
            raise

        entry.update(status_code=response.status_code, processing_time_ms=_elapsed_ms(started))
        entry.update(
            (field, response.headers[header])
            for header, field in ROUTING_HEADERS.items()
            if header in response.headers
        )
        logger.info(json.dumps(entry))
        return response
