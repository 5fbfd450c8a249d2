"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Used when SECRET_KEY is not set. Fine for local development only.
DEVELOPMENT_SECRET_KEY = "nobby-development-secret"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Nobby Forum"
    debug: bool = False
    secret_key: str = DEVELOPMENT_SECRET_KEY
    public_base_url: str = "http://localhost:8080"

    # Database
    database_path: str = "forum.db"
    pool_size: int = 10
    pool_timeout: float = 30.0

    # Listing
    page_size: int = 20
    users_page_size: int = 50

    # Sessions and credentials
    session_cookie_name: str = "nobby_session"
    session_cookie_secure: bool = False
    session_ttl_seconds: int = 60 * 60 * 24 * 30
    reset_token_ttl_seconds: int = 60 * 30
    password_iterations: int = 120_000

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Reject an explicitly empty server secret."""
        if not v:
            raise ValueError("SECRET_KEY must not be empty")
        return v

    @field_validator("pool_size", "page_size", "users_page_size", "password_iterations")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if self.secret_key == DEVELOPMENT_SECRET_KEY:
            warnings.append(
                "SECRET_KEY is not set - using the development secret, "
                "password hashes are not safe for production"
            )
        elif len(self.secret_key) < 32:
            warnings.append("SECRET_KEY is shorter than 32 characters")

        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
