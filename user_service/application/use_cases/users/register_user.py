# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from user_service.domain.users.entities import User
from user_service.domain.users.exceptions import EmailAlreadyExistsError
from user_service.domain.users.repositories import PasswordHasher, UserRepository
from user_service.domain.users.validation import validate_credentials
from user_service.shared.logging import logger


@dataclass(slots=True, frozen=True)
class RegisterUserInput:
    email: str
    password: str
    name: str


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, data: RegisterUserInput) -> User:
        validate_credentials(data.email, data.password)

        hashed = self._password_hasher.hash(data.password)
        now = self._clock()
        user = User(
            id="",
            email=data.email,
            password_hash=hashed,
            name=data.name,
            created_at=now,
            updated_at=now,
        )

        # The unique index decides; this only avoids a doomed insert.
        if self._users.find_by_email(data.email) is not None:
            logger.info("users.register: duplicate email")
            raise EmailAlreadyExistsError()

        persisted = self._users.add(user)
        logger.info(f"users.register: ok user_id={persisted.id}")
        return persisted
