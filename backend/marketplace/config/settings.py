"""
Application Settings for the Classifieds Marketplace

Centralized configuration using Pydantic Settings with .env support.
All environment variables are validated at startup.
"""

from functools import lru_cache
from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Authentication is delegated to an external identity provider.
    Tokens are verified with JWKS_URL (asymmetric keys) when configured,
    falling back to JWT_SECRET (HS256).
    """

    # Application Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # CORS Configuration
    frontend_url: str = "http://localhost:5173"
    allowed_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Authentication (token verification only, issuance is external)
    jwt_secret: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_audience: str = "authenticated"
    jwks_url: Optional[str] = None
    admin_role: str = "admin"

    # Proof storage (Supabase Storage bucket)
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    proof_bucket: str = "payment-proofs"
    max_proof_size_mb: int = 5
    allowed_proof_types: list[str] = [
        "image/jpeg",
        "image/png",
        "image/webp",
        "application/pdf",
    ]

    # Database Configuration (SQLModel/SQLAlchemy)
    database_url: Optional[str] = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    database_echo: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_auth_config(self) -> "Settings":
        """Production deployments must be able to verify tokens."""
        if self.is_production and not (self.jwt_secret or self.jwks_url):
            raise ValueError(
                "JWT_SECRET or JWKS_URL required when ENVIRONMENT=production"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment.lower() == "development"

    @property
    def max_proof_size_bytes(self) -> int:
        return self.max_proof_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export for direct import
settings = get_settings()
