"""FastAPI application for the study assistant."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Union

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from study_assistant.config import get_settings
from study_assistant.db.supabase_client import get_supabase_client
from study_assistant.middleware.logging import RequestLoggingMiddleware, configure_logging
from study_assistant.middleware.rate_limit import get_limiter, rate_limit_exceeded_handler
from study_assistant.middleware.request_id import RequestIDMiddleware
from study_assistant.routers import analysis, chats, concept_cards, models, todos
from study_assistant.services.gemini_client import get_gemini_client

logger = logging.getLogger(__name__)

# Application metadata
VERSION = "1.0.0"
COMMIT_HASH = os.environ.get("COMMIT_HASH", "development")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan event handler for startup and shutdown."""
    # Startup: raises ValidationError if required env vars are missing
    try:
        settings = get_settings()
    except Exception as e:
        logging.basicConfig()
        logger.error("Startup validation failed: %s", e)
        raise

    configure_logging(settings.log_level)
    # Never log keys
    logger.info("Starting Study Assistant API v%s", VERSION)
    logger.info("Model: %s (fallbacks: %s)", settings.model_name, ", ".join(settings.fallback_models))
    logger.info(
        "Concept cards: %s, auto titles: %s",
        settings.enable_concept_cards,
        settings.enable_auto_titles,
    )

    yield

    logger.info("Shutting down Study Assistant API")


app = FastAPI(
    title="Study Assistant API",
    description="Science study assistant: Gemini chat with structured answers, concept cards and todos",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# slowapi looks the limiter up on app.state
app.state.limiter = get_limiter()
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

# Logging runs inside RequestIDMiddleware so it sees the request id
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Educational-Query", "X-Template-Repaired", "X-Model-Used"],
)


async def _check_gemini() -> str:
    try:
        get_gemini_client()
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy"


async def _check_supabase() -> str:
    try:
        client = get_supabase_client()
        await asyncio.to_thread(lambda: client.table("chats").select("id").limit(1).execute())
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy"


@app.get("/health", response_model=None)
async def health_check() -> Union[Dict[str, Any], JSONResponse]:
    """
    Report Gemini and Supabase availability.

    Status Codes:
        200: All services healthy
        503: One or more services unavailable
    """
    services = {
        "gemini_api": await _check_gemini(),
        "supabase": await _check_supabase(),
    }
    healthy = all(status == "healthy" for status in services.values())
    body: Dict[str, Any] = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }
    if not healthy:
        return JSONResponse(status_code=503, content=body)
    return body


@app.get("/version")
async def version_info() -> Dict[str, str]:
    return {"version": VERSION, "commit_hash": COMMIT_HASH}


app.include_router(analysis.router)
app.include_router(chats.router)
app.include_router(concept_cards.router)
app.include_router(todos.router)
app.include_router(models.router)
