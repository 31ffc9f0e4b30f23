"""Application settings using environment variables."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Secrets that must never sign production tokens.
WEAK_JWT_SECRETS = frozenset({"mysecretkey", "secret", "changeme", "change-me"})
MIN_JWT_SECRET_LEN = 16


class Settings(BaseSettings):
    """Environment-driven configuration for the bookstore backend."""

    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, gt=0)

    STRIPE_SECRET_KEY: str
    CHECKOUT_CURRENCY: str = "usd"
    CHECKOUT_SUCCESS_URL: str = "http://localhost:3000/success"
    CHECKOUT_CANCEL_URL: str = "http://localhost:3000/cancel"

    USERS_FILE: Path = Path("users.json")
    BCRYPT_ROUNDS: int = Field(10, ge=4, le=31)

    CORS_ORIGINS: List[str] = ["*"]
    EXPOSE_ERROR_DETAILS: bool = True
    LOG_LEVEL: str = "INFO"

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 4242

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def refuse_weak_secret(cls, v: str) -> str:
        if v.strip().lower() in WEAK_JWT_SECRETS:
            raise ValueError("JWT_SECRET_KEY is set to a well-known insecure value")
        if len(v) < MIN_JWT_SECRET_LEN:
            raise ValueError(f"JWT_SECRET_KEY must be at least {MIN_JWT_SECRET_LEN} characters")
        return v

    @field_validator("STRIPE_SECRET_KEY")
    @classmethod
    def require_stripe_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("STRIPE_SECRET_KEY must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance to avoid re-parsing env."""
    return Settings()
