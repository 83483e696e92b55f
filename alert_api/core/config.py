"""
Application configuration loaded from environment variables.

Uses pydantic-settings to automatically read from environment
and provide type validation.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    # DATABASE_URL wins when set; otherwise the URL is assembled from the parts.
    database_url: Optional[str] = None
    db_driver: str = "postgresql+psycopg"
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "grafana"
    db_password: str = "grafana"
    db_name: str = "grafana"
    db_pool_size: int = 10

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3003
    cors_origins: list[str] = ["*"]
    max_body_bytes: int = 10 * 1024 * 1024  # webhook bodies above this get 413

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        # Load from .env file if present
        env_file=".env",
        # Environment variables are case-insensitive
        case_sensitive=False,
    )

    @property
    def sqlalchemy_url(self) -> URL:
        """The async SQLAlchemy URL for the alert database."""
        if self.database_url:
            return make_url(self.database_url)

        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


# Create a singleton instance
settings = Settings()
