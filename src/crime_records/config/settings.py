"""
Crime Records Service Settings

Configuration management using Pydantic settings with environment variable support.
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Crime Records Service configuration"""

    # Service Configuration
    service_name: str = Field(default="crime-records-service", description="Service name")
    environment: str = Field(default="development", description="Environment (development, production)")
    port: int = Field(default=8000, description="Service port")
    host: str = Field(default="0.0.0.0", description="Service host")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./crime_records.db",
        description="Database connection URL"
    )
    db_pool_size: int = Field(default=5, ge=1, description="Pooled connections kept open (non-SQLite)")
    db_max_overflow: int = Field(default=10, ge=0, description="Extra connections allowed above pool size")
    db_pool_pre_ping: bool = Field(default=True, description="Test pooled connections before use")
    db_connect_retries: int = Field(default=5, ge=1, description="Startup connection attempts")
    db_connect_backoff_seconds: float = Field(default=1.0, ge=0, description="Base delay between startup attempts")

    # Authentication
    # JWT_SECRET has no default: a missing secret is a configuration fault,
    # fatal at startup when ENVIRONMENT=production.
    jwt_secret: Optional[str] = Field(default=None, description="HMAC secret for signing bearer tokens")
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, description="bcrypt cost factor")
    protected_paths: List[str] = Field(
        default=["/api/incidents", "/api/incidents/*", "/api/auth/me"],
        description="Path patterns that require a bearer token (trailing * matches any suffix)"
    )

    # Pagination
    default_page_size: int = Field(default=10, description="Default incident page size")
    max_page_size: int = Field(default=50, description="Maximum incident page size")

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def signing_configured(self) -> bool:
        """True when a non-empty JWT secret is available"""
        return bool(self.jwt_secret)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# Global settings instance
settings = Settings()
