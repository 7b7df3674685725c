"""
division_cms.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (admin token signing secrets).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_TOKEN_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """
    Env-driven configuration:
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="DCMS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "division-cms"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Admin tokens are issued elsewhere with the same shared secret.
    admin_token_secret: str = Field(default=DEFAULT_ADMIN_TOKEN_SECRET, repr=False)
    # Previous secrets still accepted while tokens signed with them expire.
    admin_token_retired_secrets: list[str] = Field(default_factory=list, repr=False)

    cors_allow_origin: str = "*"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./division_cms.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The token secret must match the one used by the issuing service; rotate it by
# moving the old value into `admin_token_retired_secrets`.
