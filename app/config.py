# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.DB_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Earth radius per distance unit, used to turn a search distance into radians
EARTH_RADIUS = {
    "mi": 3963,
    "km": 6378,
}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # MongoDB Configuration
    # -------------------------------------------------------------------------

    DB_URL: str = Field(
        ...,
        description="MongoDB connection string (e.g., mongodb://localhost:27017)"
    )

    DB_NAME: str = Field(
        default="devcamper",
        description="Database holding the bootcamps and courses collections"
    )

    DB_TIMEOUT_MS: int = Field(
        default=5000,
        ge=100,
        description="Server selection timeout for the MongoDB client"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, request logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    API_BASE_PATH: str = Field(
        default="/api/v1",
        description="Prefix every resource route is mounted under"
    )

    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    LOG_FILE: str | None = Field(
        default=None,
        description="Optional path of a rotating log file"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_BYTES: int = Field(
        default=1_000_000,
        ge=1,
        description="Maximum photo upload size in bytes"
    )

    FILE_UPLOAD_PATH: str = Field(
        default="./public/uploads",
        description="Directory uploaded photos are written to"
    )

    # -------------------------------------------------------------------------
    # Geocoding
    # -------------------------------------------------------------------------

    GEOCODER_URL: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Nominatim-compatible search endpoint"
    )

    GEOCODER_USER_AGENT: str = Field(
        default="DevCamperAPI/1.0",
        description="User-Agent sent to the geocoding service"
    )

    GEOCODER_COUNTRY: str = Field(
        default="us",
        description="Country code used to bias zipcode lookups"
    )

    GEOCODER_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="Geocoding request timeout in seconds"
    )

    # -------------------------------------------------------------------------
    # Advanced Results
    # -------------------------------------------------------------------------

    PAGINATION_DEFAULT_LIMIT: int = Field(
        default=20,
        ge=1,
        description="Page size used when ?limit is absent or invalid"
    )

    PAGINATION_MAX_LIMIT: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on ?limit (unset = no cap)"
    )

    PAGINATION_TOTAL: Literal["filtered", "collection"] = Field(
        default="filtered",
        description="Count the filtered result set or the whole collection for pagination"
    )

    RADIUS_UNIT: Literal["mi", "km"] = Field(
        default="mi",
        description="Unit of the distance segment in radius searches"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def earth_radius(self) -> int:
        """Earth radius in RADIUS_UNIT."""
        return EARTH_RADIUS[self.RADIUS_UNIT]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
