# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SITE_NAME)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Every setting has a default, so the app starts without any environment.
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# app/config.py -> app/templates
DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the server"
    )

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    SITE_NAME: str = Field(
        default="ErrorChain",
        min_length=1,
        description="Exposed to every template as the global `site_name`"
    )

    TEMPLATES_DIR: str = Field(
        default=str(DEFAULT_TEMPLATES_DIR),
        description="Directory searched for page and error templates"
    )

    TEMPLATE_AUTO_RELOAD: bool = Field(
        default=False,
        description="Re-read template files when they change (development only)"
    )

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------

    DISPLAY_ERROR_DETAILS: bool = Field(
        default=False,
        description="Show failure messages and traces in error responses"
    )

    LOG_ERRORS: bool = Field(
        default=True,
        description="Log every failure handled by the error stage"
    )

    LOG_ERROR_DETAILS: bool = Field(
        default=False,
        description="Attach tracebacks to error log records"
    )

    CAPTURE_DIAGNOSTICS: bool = Field(
        default=True,
        description="Convert warnings raised while handling a request into log entries"
    )

    GUARD_MALFORMED_INPUT: bool = Field(
        default=True,
        description="Wrap parsing and the chain in the outer catch-all boundary"
    )

    MALFORMED_INPUT_STATUS: int = Field(
        default=400,
        ge=400,
        le=599,
        description="Status returned by the outer boundary for unhandled failures"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty values fall back to defaults
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def templates_path(self) -> Path:
        return Path(self.TEMPLATES_DIR).expanduser().resolve()

    @property
    def display_details(self) -> bool:
        """Details are always shown in debug mode, never in production."""
        if self.is_production:
            return False
        return self.DISPLAY_ERROR_DETAILS or self.DEBUG

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
