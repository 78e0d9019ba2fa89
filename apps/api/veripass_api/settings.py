"""Application settings and configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-jwt-secret-change-in-production"
DEV_ORACLE_API_KEY = "dev-oracle-api-key-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./veripass.db"
    auto_create_tables: bool = True

    # API
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Wallet session tokens (issued by the login layer)
    jwt_secret_key: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 168

    # Oracle shared secret
    oracle_api_key: str = Field(default=DEV_ORACLE_API_KEY, min_length=32)

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]
    cors_allow_credentials: bool = True

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    def validate_production_settings(self):
        """Validate settings for production environment."""
        env = self.environment.lower()
        if env not in ("development", "test", "dev"):
            if self.jwt_secret_key == DEV_JWT_SECRET or len(self.jwt_secret_key) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be set to a secret of at least 32 characters in production."
                )
            if self.oracle_api_key == DEV_ORACLE_API_KEY:
                raise ValueError(
                    "ORACLE_API_KEY is still the development default. Set a real shared secret."
                )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
