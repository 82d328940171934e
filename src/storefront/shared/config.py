"""Application settings, read from the environment (prefix ``STOREFRONT_``) and ``.env``."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the Storefront API."""

    environment: str = Field(default="development", description="development, test, staging or production")

    # Logging
    log_level: str | None = Field(default=None, description="Overrides the per-environment default level")
    log_format: str | None = Field(default=None, description="'json' or 'console'; defaults by environment")
    log_dir: str | None = Field(default=None, description="Directory for rotating log files; console only when unset")

    # Persistence
    mongo_uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection string")
    mongo_database: str = Field(default="storefront", description="Database holding all collections")

    # Auth
    jwt_secret: str = Field(default="change-me-in-production", description="HS256 signing secret")
    jwt_expires_minutes: int = Field(default=60 * 24 * 30, ge=1)
    cookie_expire_days: int = Field(default=30, ge=1)
    password_hash_rounds: int = Field(default=10, ge=4, le=31)

    # HTTP
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    client_url: str = Field(default="http://localhost:3000", description="Public frontend base URL")

    # Object storage
    storage_backend: str = Field(default="fake", description="'fake' or 's3'")
    aws_bucket_name: str | None = None
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None

    # Email
    email_backend: str = Field(default="fake", description="'fake' or 'ses'")
    email_sender: str = "no-reply@storefront.local"
    admin_email: str = "admin@storefront.local"

    # Cart abandonment
    abandonment_threshold_hours: int = Field(default=24, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOREFRONT_",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "staging")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
