"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (backend URL, secrets, cookies, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Employ.me backend
    API_BASE_URL: str = Field(
        default="http://localhost:5000/api",
        description="Employ.me REST API base URL"
    )
    API_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        description="Backend request timeout in seconds (httpx default when unset)"
    )

    # Visitor sessions
    SESSION_TIMEOUT_MINUTES: int = Field(
        default=30,
        description="Idle minutes before a visitor session is dropped"
    )
    VISITOR_COOKIE_NAME: str = Field(
        default="employme_visitor",
        description="Cookie that identifies a visitor session"
    )
    COOKIE_SECURE: bool = Field(
        default=False,
        description="Only send the visitor cookie over HTTPS"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("API_BASE_URL")
    def strip_trailing_slash(cls, v):
        """Endpoints are appended with a leading slash."""
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.API_BASE_URL:
        errors.append("API_BASE_URL is required")

    if not settings.API_BASE_URL.startswith(("http://", "https://")):
        errors.append("API_BASE_URL must be an http(s) URL")

    if settings.SESSION_TIMEOUT_MINUTES <= 0:
        errors.append("SESSION_TIMEOUT_MINUTES must be positive")

    if settings.API_TIMEOUT_SECONDS is not None and settings.API_TIMEOUT_SECONDS <= 0:
        errors.append("API_TIMEOUT_SECONDS must be positive")

    # Production-specific validations
    if settings.is_production:
        if not settings.COOKIE_SECURE:
            errors.append("COOKIE_SECURE must be enabled in production")
        if settings.API_BASE_URL.startswith("http://"):
            errors.append("API_BASE_URL must use https in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
