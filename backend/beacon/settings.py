"""Process settings for the beacon discovery responder."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default: Any, *env_names: str):
    if env_names:
        alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
        return Field(default=default, validation_alias=alias)
    return Field(default=default)


class Settings(BaseSettings):
    # Static directory artifact (delegate, contact, public rooms, aliases)
    config_path: str = _env_field("config.json", "BEACON_CONFIG_PATH", "CONFIG_PATH")
    host: str = _env_field("0.0.0.0", "BEACON_HOST")
    port: int = _env_field(8000, "BEACON_PORT")
    server_name: str = _env_field("matrix-beacon", "BEACON_SERVER_NAME")

    # Redirected alias lookups are memoised per (home_server, room_name)
    alias_cache_ttl_seconds: float = _env_field(3600.0, "BEACON_ALIAS_CACHE_TTL_SECONDS")
    upstream_timeout_seconds: float = _env_field(5.0, "BEACON_UPSTREAM_TIMEOUT_SECONDS")
    upstream_scheme: str = _env_field("https", "BEACON_UPSTREAM_SCHEME")

    environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
    obs_enabled: bool = _env_field(True, "OBS_ENABLED")
    metrics_public: bool = _env_field(True, "BEACON_METRICS_PUBLIC")
    log_level: str = _env_field("INFO", "LOG_LEVEL")
    log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")
    git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="after")
    def _normalise_level(cls, value: str) -> str:  # type: ignore[override]
        return value.strip().upper() or "INFO"

    @field_validator("upstream_scheme", mode="after")
    def _check_scheme(cls, value: str) -> str:  # type: ignore[override]
        scheme = value.strip().lower()
        if scheme not in ("http", "https"):
            raise ValueError("upstream_scheme must be http or https")
        return scheme


settings = Settings()
