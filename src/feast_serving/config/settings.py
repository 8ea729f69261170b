"""
Client Configuration Settings
=============================

Type-safe configuration for the Feast serving client using Pydantic Settings.
Every field can be overridden with a ``FEAST_SERVING_``-prefixed environment
variable or a ``.env`` file.

Usage:
    from feast_serving.config import get_settings

    settings = get_settings()
    client = FeastClient.from_settings(settings)

    # FEAST_SERVING_HOST=serving.internal FEAST_SERVING_PORT=6566
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Connection and request defaults for the serving client."""

    # Serving endpoint
    host: str = "localhost"
    port: int = Field(default=6566, ge=1, le=65535)

    # Project override sent with every request ("" = server default project)
    project: str = ""

    # Transport security
    tls_enabled: bool = False
    certificate_path: Optional[str] = None

    # Pre-issued bearer token attached to every call
    auth_token: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FEAST_SERVING_",
        extra="ignore",
    )

    @property
    def target(self) -> str:
        return f"{self.host}:{self.port}"


@lru_cache(maxsize=1)
def get_settings() -> ClientSettings:
    """
    Get cached client settings instance.

    Returns:
        ClientSettings singleton
    """
    return ClientSettings()
