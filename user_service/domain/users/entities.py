# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:
    """Account record; ``password_hash`` is never the plaintext once persisted."""

    id: str
    email: str
    password_hash: str
    name: str
    created_at: datetime
    updated_at: datetime

    def renamed(self, name: str, *, at: datetime) -> User:
        return replace(self, name=name, updated_at=at)

    def with_password_hash(self, password_hash: str, *, at: datetime) -> User:
        return replace(self, password_hash=password_hash, updated_at=at)


@dataclass(slots=True, frozen=True)
class TokenClaims:

    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class IssuedToken:

    token: str
    claims: TokenClaims

    @property
    def expires_at(self) -> datetime:
        return self.claims.expires_at
