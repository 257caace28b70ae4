"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        BULWARK_DB_HOST: Database host (default: localhost)
        BULWARK_DB_PORT: Database port (default: 5432)
        BULWARK_DB_DATABASE: Database name (default: bulwark)
        BULWARK_DB_USERNAME: Database user (default: bulwark)
        BULWARK_DB_PASSWORD: Database password (required in production)
        BULWARK_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        BULWARK_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="BULWARK_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="bulwark", description="Database name")
    username: str = Field(default="bulwark", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Tenant resolution and lifecycle settings.

    Environment variables:
        BULWARK_TENANCY_TENANT_HEADER: Header carrying an explicit tenant id
            (default: X-Tenant-Id)
        BULWARK_TENANCY_MIN_HOST_LABELS: Minimum number of dot-separated host
            labels before the leftmost label is treated as a tenant domain
            (default: 3, so acme.example.com resolves but example.com does not)
        BULWARK_TENANCY_MAX_TRIAL_DAYS: Upper bound for trial length on
            tenant creation (default: 365)
    """

    model_config = SettingsConfigDict(
        env_prefix="BULWARK_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tenant_header: str = Field(
        default="X-Tenant-Id",
        description="Request header carrying an explicit tenant identifier",
    )
    min_host_labels: int = Field(
        default=3,
        description="Host labels required for subdomain resolution",
        ge=2,
    )
    max_trial_days: int = Field(
        default=365,
        description="Maximum trial length accepted on tenant creation",
        ge=1,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="BULWARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Bulwark API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()
