from __future__ import annotations

import pytest

from user_service.shared.config import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    PasswordConfig,
    RateLimitConfig,
)

from .fakes import FAST_HASH_METHOD, TEST_SECRET


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig(
        app_env="test",
        database=DatabaseConfig(url="sqlite://", auto_migrate=True),
        jwt=AuthConfig(secret=TEST_SECRET),
        hashing=PasswordConfig(hash_method=FAST_HASH_METHOD),
        rate_limit=RateLimitConfig(enabled=False),
    )
