# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import re
import sys
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}

_INSECURE_SECRETS = ("your-secret-key", "secret", "dev", "development", "test", "")


def parse_duration(value: Any) -> Any:
    """Accept Go-style durations ("24h", "1h30m", "90s") on top of pydantic's own formats."""

    if not isinstance(value, str):
        return value
    text = value.strip().lower()
    if not text:
        return value
    if text.isdigit():
        return timedelta(seconds=int(text))
    parts = _DURATION_PART.findall(text)
    if parts and "".join(num + unit for num, unit in parts) == text:
        seconds = sum(float(num) * _DURATION_UNITS[unit] for num, unit in parts)
        return timedelta(seconds=seconds)
    return value


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class DatabaseConfig(BaseSettings):
    host: str = "localhost"
    port: int = Field(5432, ge=1, le=65535)
    user: str = "postgres"
    password: str = "password"
    name: str = "user_service"
    sslmode: str = "disable"
    url: str | None = None
    pool_size: int = Field(10, ge=1)
    max_overflow: int = Field(5, ge=0)
    pool_timeout: float = Field(30.0, ge=0.1)
    auto_migrate: bool = True

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def sqlalchemy_url(self) -> URL:
        if self.url:
            return make_url(self.url)
        return URL.create(
            "postgresql+psycopg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
            query={"sslmode": self.sslmode},
        )

    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url().get_backend_name() == "sqlite"


class AuthConfig(BaseSettings):
    secret: str = "your-secret-key"
    expiration: timedelta = timedelta(hours=24)
    refresh_grace: timedelta = timedelta(minutes=5)
    algorithm: str = "HS256"
    issuer: str = "user-service"

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("expiration", "refresh_grace", mode="before")
    @classmethod
    def _parse_durations(cls, value: Any) -> Any:
        return parse_duration(value)

    @field_validator("expiration")
    @classmethod
    def _positive_expiration(cls, value: timedelta) -> timedelta:
        if value.total_seconds() <= 0:
            raise ValueError("token expiration must be positive")
        return value

    @field_validator("refresh_grace")
    @classmethod
    def _non_negative_grace(cls, value: timedelta) -> timedelta:
        if value.total_seconds() < 0:
            raise ValueError("refresh grace cannot be negative")
        return value


class PasswordConfig(BaseSettings):
    hash_method: str = "scrypt:32768:8:1"
    salt_length: int = Field(16, ge=8)

    model_config = SettingsConfigDict(
        env_prefix="PASSWORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class RateLimitConfig(BaseSettings):
    enabled: bool = True
    requests: int = Field(10, ge=1)
    window: float = Field(60.0, ge=0.1)

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()


def _password_config_factory() -> PasswordConfig:
    return PasswordConfig()


def _rate_limit_config_factory() -> RateLimitConfig:
    return RateLimitConfig()


class AppConfig(BaseSettings):
    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    debug_logging: bool = False
    log_level: str = "INFO"
    log_file: Path | None = None
    cors_origins: str = "*"
    enable_hsts: bool = False

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    jwt: AuthConfig = Field(default_factory=_auth_config_factory)
    hashing: PasswordConfig = Field(default_factory=_password_config_factory)
    rate_limit: RateLimitConfig = Field(default_factory=_rate_limit_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("debug_logging", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        secret = self.jwt.secret
        if secret in _INSECURE_SECRETS or len(secret) < 32:
            print(
                "\nCRITICAL SECURITY ERROR: insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a random value of at least 32 characters.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(48))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        if not self.rate_limit.enabled:
            print("\nWARNING: rate limiting is DISABLED in production\n", file=sys.stderr)
        if "*" in self.allowed_origins():
            print("\nWARNING: CORS allows wildcard (*) origins in production\n", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "PasswordConfig",
    "RateLimitConfig",
    "load_config",
    "parse_duration",
]
