"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # App
    app_name: str = "bus-admin-dashboard"
    app_version: str = "0.1.0"
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")
    debug: bool = False

    # Booking backend (REST)
    backend_base_url: str = Field(default="http://localhost:8080")
    backend_timeout_s: float = Field(default=10.0, gt=0.0)

    # Redis (sessions + rate limiting). Empty -> in-process session store, no rate limiting.
    redis_url: str = ""

    # Dashboard sessions
    session_ttl_s: int = 60 * 60 * 12
    session_cookie_name: str = "dashboard_session"

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"]
    )

    # Sentry
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)

    # Rate Limiting
    rate_limit_login_per_min: int = 10
    rate_limit_auth_per_min: int = 120

    # Pagination
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Per-trip transit sequences kept in memory
    sequencer_max_trips: int = Field(default=500, ge=1)
    sequencer_idle_ttl_s: float = Field(default=60.0 * 30, gt=0.0)

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
