"""
Competence Gateway - Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again when the app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Deployments override API_URL
    and CORS_ORIGINS at minimum.
    """

    # ── Downstream API ────────────────────────────────────────────────────
    # What: Base URL of the persistence API; resource names are appended
    # Format: http://host:port/api/ (trailing slash added if missing)
    api_url: str = Field(
        default="http://localhost:3000/api/",
        description="Base URL of the downstream competence API",
    )

    # What: Total seconds allowed for one downstream request
    downstream_timeout: float = Field(default=10.0, gt=0, le=120)

    # What: Upper bound for pooled connections to the downstream API
    downstream_max_connections: int = Field(default=100, ge=1, le=1000)

    @field_validator("api_url")
    @classmethod
    def normalize_api_url(cls, v: str) -> str:
        """Resource names are appended directly, so the base must end with '/'."""
        v = v.strip()
        return v if v.endswith("/") else v + "/"

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:8080")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Retry Configuration ───────────────────────────────────────────────
    # What: Tenacity retry settings for downstream transport failures
    # Backoff: exponential with jitter, bounded by retry_max_wait
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_min_wait: float = Field(default=0.5, ge=0, le=30)
    retry_max_wait: float = Field(default=5.0, ge=0, le=120)

    # ── Circuit Breaker ───────────────────────────────────────────────────
    # How: After N consecutive transport failures, stop calling for M seconds
    cb_failure_threshold: int = Field(default=5, ge=1, le=50)
    cb_recovery_timeout: int = Field(default=30, ge=0, le=600)

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window rate limit
    rate_limit_requests: int = Field(default=1000, ge=10, le=100000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        Validates that the downstream API is configured.

        Raises:
            ValueError listing every problem found.
        """
        errors = []
        if not self.api_url.startswith(("http://", "https://")):
            errors.append(
                f"API_URL must be an http(s) URL, got '{self.api_url}'."
            )
        if self.retry_min_wait > self.retry_max_wait:
            errors.append(
                "RETRY_MIN_WAIT must not be greater than RETRY_MAX_WAIT."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
