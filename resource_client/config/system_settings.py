from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SystemSettings(BaseSettings):
    """
    Centralized client configuration.
    Reads from the environment and .env when constructed.
    """

    # Transport
    API_URL: str = Field(
        "http://localhost:3000",
        validation_alias=AliasChoices("API_URL", "VITE_API_URL"),
    )
    RESOURCE_ENDPOINT: str = "endpoint"
    REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    # Credentials
    AUTH_TOKEN_KEY: str = "authToken"
    CREDENTIAL_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    CREDENTIAL_PREFIX: str = "credentials:"

    # Cache bounds
    CACHE_MAX_ENTRIES: int = Field(1024, ge=1)
    CACHE_TTL_SECONDS: Optional[float] = Field(None, gt=0)

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def load_system_settings() -> SystemSettings:
    """Build settings from the current environment."""
    return SystemSettings()
