"""Environment-driven settings for the study assistant.

Values come from the process environment or a local .env file and are
validated once, on first use; a missing Gemini or Supabase credential
fails fast with a message naming the variable.
"""

from functools import lru_cache
from typing import Annotated, Optional, Tuple

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_FALLBACK_MODELS: Tuple[str, ...] = (
    "gemini-2.0-flash",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
)

KEY_HINTS = {
    "gemini_api_key": ". Get your API key from https://ai.google.dev/",
    "supabase_key": " (Project Settings > API > anon key)",
}


class Settings(BaseSettings):
    """Study assistant settings. Field names map to upper-case env vars."""

    # Credentials
    gemini_api_key: str = Field(
        ...,
        description="Google Gemini API key for chat completions"
    )

    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anonymous key"
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (bypasses RLS when set)"
    )

    # Models
    model_name: str = Field(
        default="gemini-2.0-flash",
        description="Default Gemini model for chat replies"
    )
    fallback_models: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_FALLBACK_MODELS,
        description="Models tried in order when the requested model fails"
    )
    concept_card_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model used to draft concept cards"
    )
    title_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model used to name new chats"
    )
    default_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for casual (non-educational) replies"
    )

    # Features
    enable_concept_cards: bool = Field(
        default=True,
        description="Generate concept cards from educational exchanges"
    )
    enable_auto_titles: bool = Field(
        default=True,
        description="Name new chats from their first exchange"
    )

    # Networking / observability
    trusted_proxies: str = Field(
        default="",
        description="Comma-separated proxy IPs allowed to set X-Forwarded-For"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    @field_validator("gemini_api_key", "supabase_key")
    @classmethod
    def require_secret(cls, v: str, info: ValidationInfo) -> str:
        """Reject blank keys; surrounding whitespace is dropped."""
        if not v or not v.strip():
            hint = KEY_HINTS.get(info.field_name or "", "")
            raise ValueError(f"{(info.field_name or '').upper()} must be set in environment variables{hint}")
        return v.strip()

    @field_validator("supabase_url")
    @classmethod
    def require_https_url(cls, v: str) -> str:
        url = v.strip() if v else ""
        if not url:
            raise ValueError("SUPABASE_URL must be set in environment variables")
        if not url.startswith("https://"):
            raise ValueError(f"SUPABASE_URL must start with https:// (got: {url[:20]}...)")
        return url

    @field_validator("supabase_service_role_key")
    @classmethod
    def validate_service_role_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty service role key as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("fallback_models", mode="before")
    @classmethod
    def parse_fallback_models(cls, v: object) -> Tuple[str, ...]:
        """Accept a comma-separated string or a sequence of model ids."""
        if isinstance(v, str):
            items = [m.strip() for m in v.split(",")]
        elif isinstance(v, (list, tuple)):
            items = [str(m).strip() for m in v]
        else:
            raise ValueError("FALLBACK_MODELS must be a comma-separated list")
        models = tuple(m for m in items if m)
        if not models:
            raise ValueError("FALLBACK_MODELS must name at least one model")
        return models

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level (got: {v})")
        return level


@lru_cache
def get_settings() -> Settings:
    """Settings for this process, built once and cached.

    Call ``get_settings.cache_clear()`` after changing the environment.

    Raises:
        ValidationError: If a required variable is missing or invalid
    """
    return Settings()
