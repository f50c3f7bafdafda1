"""
Pi-hole Widgets Configuration

Host application settings. The data-acquisition core never reads these
directly; the host turns them into an EndpointConfig per refresh cycle.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # APP
    # ==========================================================================
    app_name: str = "Pi-hole Widgets"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # APPLIANCE
    # ==========================================================================
    pihole_hostname: str = "http://pi.hole"
    pihole_api_key: str | None = None  # Empty/None = unauthenticated mode
    pihole_count: int = 10  # Top-domains entries per category
    pihole_request_timeout: float = 10.0  # Transport-level, seconds

    # ==========================================================================
    # REFRESH
    # ==========================================================================
    widget_refresh_seconds: int = 0  # 0 disables background refresh

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
