# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import IssuedToken, TokenClaims, User


class UserRepository(Protocol):
    def add(self, user: User) -> User: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def find_by_email(self, email: str) -> User | None: ...
    def update(self, user: User) -> User: ...
    def delete(self, user_id: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
    def needs_rehash(self, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, user_id: str, email: str) -> IssuedToken: ...
    def validate(self, token: str) -> TokenClaims: ...
    def refresh(self, token: str) -> IssuedToken: ...
