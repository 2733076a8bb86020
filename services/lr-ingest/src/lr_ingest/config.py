"""Lightroom integration configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://lr.adobe.io"


class Settings(BaseSettings):
    """Configuration for talking to the Lightroom services.

    Values come from ``LR_*`` environment variables or a local ``.env`` file.
    The API key doubles as the service identifier stamped on the projects and
    revisions this integration creates.
    """

    model_config = SettingsConfigDict(env_prefix="LR_", env_file=".env", extra="ignore")

    api_key: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 30.0
    log_level: str = "INFO"

    # Only read by the command line front end
    access_token: Optional[str] = None

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache configuration for the current process."""

    return Settings()  # type: ignore[call-arg]


__all__ = ["DEFAULT_ENDPOINT", "Settings", "get_settings"]
