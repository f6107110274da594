"""
Configuration management for the Storefront API.

Loads settings from .env via pydantic-settings.

Security notes:
    - validate_production_settings() enforces strict CORS in production
    - ALLOW_HEADER_AUTH (X-User-Id) is a development convenience and is
      refused in production
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/storefront.db"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── Auth (JWT verification only; tokens are issued elsewhere) ───
    jwt_secret: str = ""
    jwt_issuer: str = "storefront-auth"
    allow_header_auth: bool = True  # accept X-User-Id outside production

    # ── Simulated payment gateway ───────────────────────────────────
    payment_approval_rate: float = 0.90
    payment_processing_delay_seconds: float = 1.0
    min_card_number_length: int = 16

    # ── Rate limits (payments) ──────────────────────────────────────
    payment_rate_limit_requests: int = 10
    payment_rate_limit_window_seconds: int = 60

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Raises ValueError in production when an
        unsafe option is enabled; only logs warnings elsewhere.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if self.allow_header_auth:
                raise ValueError(
                    "ALLOW_HEADER_AUTH must be false in production. "
                    "The X-User-Id header is not authenticated."
                )
            if not self.jwt_secret:
                raise ValueError(
                    "JWT_SECRET must be set in production. "
                    "It is used to verify bearer tokens."
                )
            logger.info("Production settings validated")
        else:
            warnings = []
            if self.allow_header_auth:
                warnings.append("ALLOW_HEADER_AUTH=true (X-User-Id header trusted)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            if not self.jwt_secret:
                warnings.append("JWT_SECRET not set (bearer tokens will be rejected)")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
