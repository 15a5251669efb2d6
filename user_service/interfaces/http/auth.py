# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from flask import g, request

from user_service.domain.users.repositories import TokenService
from user_service.shared.errors.base import AppError
from user_service.shared.logging import logger


class MissingTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(
            code="missing_token",
            status=HTTPStatus.UNAUTHORIZED,
            message="Authorization header is required",
        )


class InvalidAuthorizationFormatError(AppError):
    def __init__(self) -> None:
        super().__init__(
            code="invalid_authorization",
            status=HTTPStatus.UNAUTHORIZED,
            message="Invalid authorization format",
        )


def extract_bearer_token() -> str:
    """Return the token from ``Authorization: Bearer <token>`` or raise a 401 error."""

    header = request.headers.get("Authorization", "")
    if not header:
        logger.warning(f"No Authorization header on {request.method} {request.path}")
        raise MissingTokenError()

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise InvalidAuthorizationFormatError()
    return parts[1]


class BearerAuthenticator:
    """Validates bearer tokens and stores the caller on ``flask.g``."""

    def __init__(self, tokens: TokenService) -> None:
        self._tokens = tokens

    def required(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            claims = self._tokens.validate(extract_bearer_token())
            g.user_id = claims.user_id
            g.email = claims.email
            logger.debug(f"Auth OK: user={claims.user_id} {request.method} {request.path}")
            return func(*args, **kwargs)

        return wrapper


def current_user_id() -> str:
    return g.user_id


__all__ = [
    "BearerAuthenticator",
    "InvalidAuthorizationFormatError",
    "MissingTokenError",
    "current_user_id",
    "extract_bearer_token",
]
