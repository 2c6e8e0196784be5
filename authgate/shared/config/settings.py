# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)

INSECURE_SECRETS = frozenset({"", "dev", "development", "test", "change-me"})


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///authgate.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _ENV_CONFIG

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def is_in_memory(self) -> bool:
        return self.url in ("sqlite://", "sqlite:///:memory:")


class SecurityConfig(BaseSettings):
    # Token signing
    jwt_secret: str = Field("dev", alias="JWT_SECRET")
    jwt_expires_in: int = Field(24 * 60 * 60, ge=1, alias="JWT_EXPIRES_IN")

    # Werkzeug method string, the work factor lives in it
    password_hash_method: str = Field("scrypt:32768:8:1", alias="PASSWORD_HASH_METHOD")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Only honour X-Forwarded-For behind a trusted proxy
    trust_proxy_headers: bool = Field(False, alias="TRUST_PROXY_HEADERS")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _ENV_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(seconds=self.jwt_expires_in)


class LockoutConfig(BaseSettings):
    max_failed_attempts: int = Field(5, ge=1, alias="MAX_LOGIN_ATTEMPTS")
    lockout_minutes: float = Field(15.0, gt=0, alias="LOCKOUT_MINUTES")

    model_config = _ENV_CONFIG

    @property
    def lockout_duration(self) -> timedelta:
        return timedelta(minutes=self.lockout_minutes)


class RateLimitConfig(BaseSettings):
    max_failures: int = Field(5, ge=1, alias="RATE_LIMIT_MAX_FAILURES")
    window_seconds: float = Field(15 * 60, gt=0, alias="RATE_LIMIT_WINDOW_SECONDS")
    retry_after: int = Field(900, ge=1, alias="RATE_LIMIT_RETRY_AFTER")

    model_config = _ENV_CONFIG

    @property
    def window(self) -> timedelta:
        return timedelta(seconds=self.window_seconds)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _lockout_config_factory() -> LockoutConfig:
    return LockoutConfig()  # type: ignore[call-arg]


def _rate_limit_config_factory() -> RateLimitConfig:
    return RateLimitConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    lockout: LockoutConfig = Field(default_factory=_lockout_config_factory)
    rate_limit: RateLimitConfig = Field(default_factory=_rate_limit_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
    )

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self
        if self.security.jwt_secret in INSECURE_SECRETS:
            raise ValueError(
                "JWT_SECRET must be a strong random value in production; generate one "
                'with: python -c "import secrets; print(secrets.token_urlsafe(48))"'
            )
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "LockoutConfig",
    "RateLimitConfig",
    "SecurityConfig",
    "load_config",
]
