"""Application settings and configuration."""

import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_JWT_DEFAULTS = {"change-me-in-production", "secret"}


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "gac"
    env: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"  # console or json
    allowed_origins: str = "http://localhost:3000"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_expire_hours: int = 8

    # Database
    database_url: str = "sqlite:///./gac.db"

    # Seed the default referrer types at start-up when the table is empty
    seed_default_referrer_types: bool = True


# Global settings instance
settings = Settings()

if settings.env == "production":
    if settings.jwt_secret_key in _INSECURE_JWT_DEFAULTS or len(settings.jwt_secret_key) < 32:
        print(
            "\nFATAL: JWT_SECRET_KEY is insecure or too short (min 32 chars).\n"
            "   Set a strong random value:  openssl rand -hex 32\n",
            file=sys.stderr,
        )
        sys.exit(1)
