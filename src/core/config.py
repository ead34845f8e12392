"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="User Directory API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/users",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # Keycloak
    keycloak_url: str = Field(
        default="",
        description="Keycloak base URL (e.g. https://auth.example.org)",
    )
    keycloak_realm: str = Field(default="master")
    keycloak_audience: str = Field(
        default="",
        description="Expected token audience; audience is not verified when empty",
    )

    # JWT Authentication (HS256 path, used for tests and local tooling)
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for HS256 token signing",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Profile images
    profile_image_bucket: str = Field(default="")
    aws_region: str = Field(default="us-east-1")
    profile_image_upload_expiry_seconds: int = Field(default=60 * 5)
    profile_image_extension: str = Field(default="jpeg")
    profile_image_content_type: str = Field(default="image/jpeg")

    # Search
    search_default_page_size: int = Field(default=15)
    search_max_page_size: int = Field(default=100)

    # Category migration
    category_migration_concurrency: int = Field(
        default=10,
        description="Maximum number of records re-normalized concurrently",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def keycloak_issuer(self) -> str:
        """Realm issuer URL."""
        if self.keycloak_url:
            return f"{self.keycloak_url.rstrip('/')}/realms/{self.keycloak_realm}"
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def keycloak_jwks_url(self) -> str:
        """JWKS endpoint for RS256 token verification."""
        if self.keycloak_issuer:
            return f"{self.keycloak_issuer}/protocol/openid-connect/certs"
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers usually supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
