"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./salon_ops.db"

    # Comma-separated list of allowed CORS origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Server
    rest_api_port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    # Seed demo branches, staff and appointments on startup
    seed_demo_data: bool = False

    # Active-location cache; mutations invalidate explicitly, TTL is the safety net
    location_cache_ttl_seconds: int = 300

    # Label of the built-in permission table snapshot
    permission_registry_version: str = "2025.1"

    # Accept X-Principal-* headers set by an authenticating gateway in front of the API
    trust_principal_headers: bool = False

    def cors_origins(self) -> list[str]:
        """Parse allowed_origins into a list, falling back to local dev servers."""
        if self.allowed_origins:
            return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
        return [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]

    def validate_production_settings(self) -> list[str]:
        """
        Validate configuration for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be set in production (comma-separated list of allowed domains)"
                )

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

            if self.seed_demo_data:
                errors.append("SEED_DEMO_DATA must be False in production")

        if self.location_cache_ttl_seconds < 0:
            errors.append("LOCATION_CACHE_TTL_SECONDS must not be negative")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

# Direct access to commonly used settings
DATABASE_URL = settings.database_url
