"""Squadboard settings.

Values come from SQUADBOARD_* environment variables or a .env file in the
working directory. Call get_settings() instead of building Settings in
request paths; it is cached for the process lifetime.
"""

import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_config_dir() -> Path:
    """Return the default data directory (~/.squadboard)."""
    return Path.home() / ".squadboard"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SQUADBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=get_config_dir)
    web_host: str = "127.0.0.1"
    web_port: int = 8888
    public_base_url: str = "http://localhost:8888"
    log_level: str = "INFO"
    api_cors_allowed_origins: list[str] = Field(default_factory=list)

    # Signed attachment URLs. A random key means URLs die with the process.
    storage_signing_key: str = Field(default_factory=lambda: secrets.token_hex(32))
    upload_url_ttl_seconds: int = 3600


@lru_cache
def get_settings() -> Settings:
    return Settings()
