"""Application configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    database_url: str
    app_env: str = "dev"
    log_level: str = "INFO"

    # Coaching context request defaults
    default_weeks_back: int = 6
    default_recent_rides: int = 5
    max_weeks_back: int = 52
    max_recent_rides: int = 50

    # HTTP surface
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("http://localhost:3000",))
    request_id_header_name: str = "X-Request-ID"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
        "max_recent_rides": 20,
    },
}


def get_database_url() -> str:
    """Resolve database URL from env var or a local default."""
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url
    return "postgresql+psycopg2://localhost:5432/ridecoach"


def _parse_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ("http://localhost:3000",)
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        database_url=get_database_url(),
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        default_weeks_back=int(os.getenv("DEFAULT_WEEKS_BACK", "6")),
        default_recent_rides=int(os.getenv("DEFAULT_RECENT_RIDES", "5")),
        max_weeks_back=int(os.getenv("MAX_WEEKS_BACK", str(profile.get("max_weeks_back", 52)))),
        max_recent_rides=int(os.getenv("MAX_RECENT_RIDES", str(profile.get("max_recent_rides", 50)))),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS")),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER", "X-Request-ID"),
    )
