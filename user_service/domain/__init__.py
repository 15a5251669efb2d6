# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from user_service.shared.errors.base import DomainError

from .users import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidTokenError,
    IssuedToken,
    TokenClaims,
    User,
    UserNotFoundError,
    WeakPasswordError,
)

__all__ = [
    "DomainError",
    "EmailAlreadyExistsError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidTokenError",
    "IssuedToken",
    "TokenClaims",
    "User",
    "UserNotFoundError",
    "WeakPasswordError",
]
