"""
Configuration settings for the SchemeFinder Eligibility Engine
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application Configuration
    app_name: str = Field(default="SchemeFinder Eligibility Engine")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # MongoDB Configuration
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_db_name: str = Field(default="schemes_db")
    users_collection: str = Field(default="users")
    scheme_rules_collection: str = Field(default="scheme_rules")

    # Eligibility cache
    cache_ttl_seconds: int = Field(
        default=3600,
        gt=0,
        description="Passive expiry for cached eligibility results"
    )

    # Catalog ingest
    strict_catalog_ingest: bool = Field(
        default=False,
        description="Fail the whole catalog load on the first malformed scheme"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create global settings instance
settings = Settings()
