from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from user_service.domain.users.entities import User
from user_service.domain.users.exceptions import EmailAlreadyExistsError, UserNotFoundError
from user_service.domain.users.repositories import PasswordHasher, UserRepository

TEST_SECRET = "test-signing-secret-0123456789-abcdefghij"
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._deleted: dict[str, User] = {}

    def add(self, user: User) -> User:
        if any(u.email == user.email for u in (*self._users.values(), *self._deleted.values())):
            raise EmailAlreadyExistsError()
        stored = replace(user, id=user.id or str(uuid.uuid4()))
        self._users[stored.id] = stored
        return stored

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def update(self, user: User) -> User:
        if user.id not in self._users:
            raise UserNotFoundError()
        self._users[user.id] = user
        return user

    def delete(self, user_id: str) -> None:
        user = self._users.pop(user_id, None)
        if user is None:
            raise UserNotFoundError()
        self._deleted[user_id] = user


class DeterministicHasher(PasswordHasher):
    def __init__(self, method: str = "fake") -> None:
        self.method = method
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        return f"{self.method}${password[::-1]}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"{hashed.split('$', 1)[0]}${password[::-1]}"

    def needs_rehash(self, hashed: str) -> bool:
        return hashed.split("$", 1)[0] != self.method
