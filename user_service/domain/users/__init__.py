# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import IssuedToken, TokenClaims, User
from .exceptions import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidTokenError,
    UserNotFoundError,
    WeakPasswordError,
)
from .repositories import PasswordHasher, TokenService, UserRepository

__all__ = [
    "EmailAlreadyExistsError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidTokenError",
    "IssuedToken",
    "PasswordHasher",
    "TokenClaims",
    "TokenService",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "WeakPasswordError",
]
