"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class StorageBackend(str, Enum):
    """Record store implementations selectable at process start"""

    JSON = "json"
    MONGODB = "mongodb"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="MenuBoard", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, ge=1, le=65535, description="Server port")

    # Record store selection
    storage_backend: StorageBackend = Field(
        default=StorageBackend.JSON, description="Record store backend (json or mongodb)"
    )
    data_file: Path = Field(
        default=Path("data.json"), description="JSON document used by the json backend"
    )

    # MongoDB settings
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("MONGO_URI", "MONGODB_URI"),
        description="MongoDB connection URI",
    )
    mongo_db_name: str = Field(default="menuboard", description="MongoDB database name")

    # Uploaded photos
    upload_dir: Path = Field(
        default=Path("uploads"), description="Directory holding uploaded photos"
    )
    upload_url_prefix: str = Field(
        default="/uploads", description="Public path prefix photos are served under"
    )
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024, ge=1, description="Upload size ceiling in bytes"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
    cors_allow_credentials: bool = Field(
        default=False, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    api_title: str = Field(default="MenuBoard API", description="API documentation title")
    api_description: str = Field(
        default="Restaurant menu management with photo uploads",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("environment", "storage_backend", mode="before")
    @classmethod
    def normalize_enum(cls, v):
        """Accept enum values in any case"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("upload_url_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Normalize the public prefix to a leading slash and no trailing slash"""
        v = "/" + v.strip().strip("/")
        if v == "/":
            raise ValueError("upload_url_prefix must not be the site root")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def uses_mongodb(self) -> bool:
        return self.storage_backend == StorageBackend.MONGODB
