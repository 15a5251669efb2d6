# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from user_service.domain.users.entities import User
from user_service.domain.users.exceptions import UserNotFoundError
from user_service.domain.users.repositories import UserRepository
from user_service.shared.logging import logger


class UpdateProfileUseCase:
    """Renames a user. Email and id are immutable through this path."""

    def __init__(
        self,
        *,
        users: UserRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._clock = clock

    def execute(self, user_id: str, name: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        now = self._clock()
        if now <= user.updated_at:
            now = user.updated_at + timedelta(microseconds=1)

        updated = self._users.update(user.renamed(name, at=now))
        logger.info(f"users.update_profile: ok user_id={user_id}")
        return updated
