"""Shared fixtures: test environment and fresh settings/client caches."""

import os
from unittest.mock import MagicMock

import pytest

# Required settings must exist before the app reads them lazily
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-api-key")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-supabase-key")

from study_assistant.config import get_settings  # noqa: E402
from study_assistant.db.supabase_client import reset_supabase_client  # noqa: E402
from study_assistant.middleware.rate_limit import get_limiter  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_state():
    """Clear cached settings, the Supabase singleton and rate limit counters."""
    get_settings.cache_clear()
    reset_supabase_client()
    get_limiter().reset()
    yield
    get_settings.cache_clear()
    reset_supabase_client()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Known values for the required environment variables."""
    values = {
        "GEMINI_API_KEY": "test-gemini-api-key",
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_KEY": "test-supabase-key",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    for key in ("SUPABASE_SERVICE_ROLE_KEY", "MODEL_NAME", "FALLBACK_MODELS", "TRUSTED_PROXIES"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    return values


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    return MagicMock()
