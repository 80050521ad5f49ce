# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import BeforeValidator, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from campusdesk.shared.logging import logger

_TRUTHY = {"1", "true", "yes", "on"}
_INSECURE_SECRETS = {"", "dev", "development", "test", "changeme"}

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _as_flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


EnvFlag = Annotated[bool, BeforeValidator(_as_flag)]


class DatabaseConfig(BaseSettings):
    model_config = _ENV

    url: str = Field("sqlite:///campusdesk.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")


class SessionConfig(BaseSettings):
    """Lifetime and transport of the login session cookie."""

    model_config = _ENV

    ttl_seconds: int = Field(7 * 24 * 60 * 60, ge=1, alias="SESSION_TTL_SECONDS")
    cookie_name: str = Field("auth_token", min_length=1, alias="AUTH_COOKIE_NAME")


class SecurityConfig(BaseSettings):
    model_config = _ENV

    cookie_secure: EnvFlag = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: Literal["Lax", "Strict", "None"] = Field("Lax", alias="COOKIE_SAMESITE")
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    enable_rate_limit: EnvFlag = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, gt=0, alias="RL_WINDOW")

    enable_hsts: EnvFlag = Field(False, alias="ENABLE_HSTS")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: EnvFlag = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @model_validator(mode="after")
    def _check_production(self) -> AppConfig:
        if not self.is_production():
            return self

        if self.secret_key.strip().lower() in _INSECURE_SECRETS:
            raise ValueError("SECRET_KEY must be set to a strong random value when APP_ENV=production")

        if not self.security.cookie_secure:
            logger.warning("config: COOKIE_SECURE is off; the session cookie is forced Secure in production")
        if "*" in self.security.allowed_origins:
            logger.warning("config: ALLOWED_ORIGINS contains '*'")
        if not self.security.enable_hsts:
            logger.warning("config: ENABLE_HSTS is off")
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() in ("production", "prod")

    def cookie_secure(self) -> bool:
        return self.security.cookie_secure or self.is_production()


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "DatabaseConfig", "SecurityConfig", "SessionConfig", "load_config"]
