"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, no scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for the verification callable and exports.
        max_request_size_bytes: Maximum allowed request body size.

    The database URL is either given whole (DATABASE_URL) or built from the
    postgres_* parts, so Docker Compose setups need no extra variable.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Fowl Registry"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"
    max_request_size_bytes: int = 1_048_576  # 1 MB

    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "fowl_registry"
    auto_create_schema: bool = False

    # Bearer tokens are issued by the identity provider; we only verify them.
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    push_gateway_url: Optional[str] = None
    push_gateway_token: Optional[str] = None
    push_timeout_seconds: float = 10.0

    analytics_sink_url: Optional[str] = None
    analytics_export_dir: str = "exports/analytics"
    analytics_export_enabled: bool = True
    analytics_export_hour_utc: int = 2

    family_tree_max_generations: int = 3
    family_tree_level_radius: float = 100.0

    def get_database_url(self) -> str:
        """Return the effective SQLAlchemy URL.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build a PostgreSQL URL from postgres_* values
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
