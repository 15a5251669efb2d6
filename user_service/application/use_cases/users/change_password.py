# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from user_service.domain.users.exceptions import InvalidCredentialsError, UserNotFoundError
from user_service.domain.users.repositories import PasswordHasher, UserRepository
from user_service.domain.users.validation import validate_password
from user_service.shared.logging import logger


class ChangePasswordUseCase:
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

    def execute(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        if not self._password_hasher.verify(current_password, user.password_hash):
            logger.info(f"users.change_password: rejected user_id={user_id}")
            raise InvalidCredentialsError()

        validate_password(new_password)

        hashed = self._password_hasher.hash(new_password)
        self._users.update(user.with_password_hash(hashed, at=self._clock()))
        logger.info(f"users.change_password: ok user_id={user_id}")
