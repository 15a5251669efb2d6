# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account input rules shared by registration and credential rotation."""

from __future__ import annotations

import re

from .exceptions import InvalidEmailError, WeakPasswordError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MIN_PASSWORD_LENGTH = 8

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def is_strong_password(password: str) -> bool:
    """At least eight characters with an upper-case letter, a lower-case letter and a digit."""

    if len(password) < MIN_PASSWORD_LENGTH:
        return False
    return all(rule.search(password) for rule in (_UPPER, _LOWER, _DIGIT))


def validate_email(email: str) -> None:
    if not is_valid_email(email):
        raise InvalidEmailError()


def validate_password(password: str) -> None:
    if not is_strong_password(password):
        raise WeakPasswordError()


def validate_credentials(email: str, password: str) -> None:
    validate_email(email)
    validate_password(password)


__all__ = [
    "EMAIL_PATTERN",
    "MIN_PASSWORD_LENGTH",
    "is_strong_password",
    "is_valid_email",
    "validate_credentials",
    "validate_email",
    "validate_password",
]
