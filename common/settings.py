"""Application settings loaded from environment variables."""

from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database. No host means no database is configured: reads degrade to
    # empty results and writes fail.
    postgres_host: Optional[str] = Field(
        None, validation_alias=AliasChoices("POSTGRES_HOST", "DB_HOST")
    )
    postgres_port: int = Field(5432, validation_alias=AliasChoices("POSTGRES_PORT"))
    postgres_db: str = Field(
        "binah", validation_alias=AliasChoices("POSTGRES_DB", "DB_NAME")
    )
    postgres_user: str = Field(
        "postgres", validation_alias=AliasChoices("POSTGRES_USER", "DB_USER")
    )
    postgres_password: str = Field(
        "", validation_alias=AliasChoices("POSTGRES_PASSWORD", "DB_PASSWORD")
    )
    postgres_sslmode: str = Field(
        "prefer", validation_alias=AliasChoices("POSTGRES_SSLMODE")
    )

    # Connection pool
    pool_max_size: int = Field(10, ge=1, validation_alias=AliasChoices("POOL_MAX_SIZE"))
    pool_acquire_timeout: float = Field(
        60.0, gt=0, validation_alias=AliasChoices("POOL_ACQUIRE_TIMEOUT")
    )
    statement_timeout: float = Field(
        60.0, ge=0, validation_alias=AliasChoices("STATEMENT_TIMEOUT")
    )

    # Deployment
    environment: str = Field(
        "development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV")
    )
    cors_origins: str = Field(
        "https://binah-full.vercel.app", validation_alias=AliasChoices("CORS_ORIGINS")
    )
    cors_origin_regex: Optional[str] = Field(
        r"https://.*\.vercel\.app", validation_alias=AliasChoices("CORS_ORIGIN_REGEX")
    )

    log_level: str = Field("INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    api_host: str = Field("0.0.0.0", validation_alias=AliasChoices("API_HOST"))
    api_port: int = Field(3001, validation_alias=AliasChoices("API_PORT"))

    @property
    def database_configured(self) -> bool:
        return bool(self.postgres_host)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        """Comma-separated CORS_ORIGINS as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
