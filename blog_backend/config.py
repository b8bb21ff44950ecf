"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Calculate project root: config.py is in blog_backend/, so go up one level
_CONFIG_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CONFIG_DIR.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / "blog_backend" / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Blog Platform", description="Application name")
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Root logging level", alias="LOG_LEVEL")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed by the CORS middleware",
        alias="CORS_ORIGINS",
    )

    # Security
    secret_key: str = Field(
        ...,
        description="Secret key for JWT tokens",
        alias="SECRET_KEY",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(default=60, description="Access token expiration in minutes")

    # Database
    database_url: str = Field(
        ...,
        description="Database connection URL",
        alias="DATABASE_URL",
    )

    # Post listing
    default_per_page: int = Field(default=10, description="Page size used when per_page is missing or invalid")
    max_per_page: int = Field(default=100, description="Upper bound for per_page")

    # Seed admin
    admin_email: str = Field(default="admin@test.com", description="Seeded admin email", alias="ADMIN_EMAIL")
    admin_name: str = Field(default="Admin", description="Seeded admin name", alias="ADMIN_NAME")
    admin_password: str = Field(default="password", description="Seeded admin password", alias="ADMIN_PASSWORD")

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str:
        """Validate and normalize database URL."""
        if v is None or v == "":
            raise ValueError("DATABASE_URL is required")
        return v.strip()

    @field_validator("app_env", mode="before")
    @classmethod
    def normalize_app_env(cls, v: str) -> str:
        """Normalize app environment to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to the upper-case names used by logging."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @field_validator("default_per_page", "max_per_page")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Page sizes must be positive."""
        if v < 1:
            raise ValueError("Page size settings must be at least 1")
        return v


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings: Application settings instance

    Example:
        ```python
        from blog_backend.config import get_settings

        settings = get_settings()
        print(settings.database_url)
        ```
    """
    return Settings()


# Global settings instance
settings = get_settings()
