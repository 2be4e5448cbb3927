"""Application settings and configuration."""

import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_JWT_DEFAULTS = {"change-me-in-production", "secret", "your_jwt_secret_key_here_at_least_32_characters"}


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "sydai"
    env: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"  # console | json
    allowed_origins: str = "http://localhost:5000"

    # Public URL used for shareable referral links
    public_base_url: str = "http://localhost:5000"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_expire_hours: int = 24

    # Database
    database_url: str = "sqlite:///./sydai.db"
    sql_echo: bool = False

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def validate_production_settings(config: Settings) -> None:
    """Abort startup when production runs with an insecure JWT secret."""
    if not config.is_production:
        return
    if config.jwt_secret_key in _INSECURE_JWT_DEFAULTS or len(config.jwt_secret_key) < 32:
        print(
            "\n❌  FATAL: JWT_SECRET_KEY is insecure or too short (min 32 chars).\n"
            "   Set a strong random value:  openssl rand -hex 32\n",
            file=sys.stderr,
        )
        sys.exit(1)


# Global settings instance
settings = Settings()
