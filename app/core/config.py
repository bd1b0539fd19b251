# app/core/config.py
from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings are used for:
    - LiveKit project credentials (API key/secret, project id)
    - Analytics API base URL override and HTTP timeout
    - Service token identity / lifetime
    - Logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Call History Service"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG/INFO/WARNING/ERROR).")

    # Required for any call to the LiveKit Analytics API.
    LIVEKIT_API_KEY: str | None = None
    LIVEKIT_API_SECRET: str | None = None
    LIVEKIT_PROJECT_ID: str | None = None

    LIVEKIT_BASE_URL: AnyHttpUrl | None = Field(
        default=None,
        description="Override for the analytics API host. Defaults to LiveKit Cloud.",
    )
    LIVEKIT_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout applied to each outbound analytics request.",
    )
    LIVEKIT_TOKEN_TTL_SECONDS: int = Field(
        default=300,
        description="Lifetime of the service token minted for each analytics request.",
    )
    LIVEKIT_TOKEN_IDENTITY: str = Field(
        default="playground-api-service",
        description="Identity claim of the server-side token used against the analytics API.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
