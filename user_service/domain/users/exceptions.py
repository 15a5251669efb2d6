# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from user_service.shared.errors.base import DomainError


class InvalidEmailError(DomainError):
    code = "invalid_email"
    status = HTTPStatus.BAD_REQUEST
    message = "Invalid email format"


class WeakPasswordError(DomainError):
    code = "weak_password"
    status = HTTPStatus.BAD_REQUEST
    message = "Password does not meet security requirements"


class EmailAlreadyExistsError(DomainError):
    code = "email_already_exists"
    status = HTTPStatus.CONFLICT
    message = "Email already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class InvalidTokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid or expired token"


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "User not found"
