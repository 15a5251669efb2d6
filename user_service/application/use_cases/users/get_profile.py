# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from user_service.domain.users.entities import User
from user_service.domain.users.exceptions import UserNotFoundError
from user_service.domain.users.repositories import UserRepository


class GetProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user
