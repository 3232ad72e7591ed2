"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        environment: Deployment environment.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        database_url: Postgres DSN. When unset, in-memory repositories are used.
        rate_limit_default: slowapi limit for public read endpoints.
        rate_limit_*_requests / rate_limit_*_window_seconds: Fixed-window
            budget of each sensitive operation class.
        rate_limit_sweep_interval_seconds: How often expired limiter
            entries are dropped.
        trust_forwarded_headers: Derive the client key from
            X-Forwarded-For / X-Real-IP when set.
        max_request_size_bytes: Maximum allowed JSON body size.
        max_query_string_length: Maximum length of the raw query string.
        session_cookie_name: Cookie carrying the session token.
        session_duration_days: Lifetime of a login session.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "JobBoard"
    version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    database_url: Optional[str] = None

    rate_limit_default: str = "60/minute"
    rate_limit_auth_requests: int = 5
    rate_limit_auth_window_seconds: int = 15 * 60
    rate_limit_job_creation_requests: int = 10
    rate_limit_job_creation_window_seconds: int = 60 * 60
    rate_limit_application_requests: int = 20
    rate_limit_application_window_seconds: int = 60 * 60
    rate_limit_admin_requests: int = 100
    rate_limit_admin_window_seconds: int = 60
    rate_limit_sweep_interval_seconds: float = 5 * 60
    trust_forwarded_headers: bool = True

    max_request_size_bytes: int = 1_048_576  # 1 MB
    max_query_string_length: int = 2048

    session_cookie_name: str = "session_token"
    session_duration_days: int = 7

    def get_async_database_url(self) -> Optional[str]:
        """Return the DSN rewritten for the asyncpg driver, or None."""
        if not self.database_url:
            return None
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.database_url


settings = Settings()
