# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from user_service.domain.users.repositories import UserRepository
from user_service.shared.logging import logger


class DeleteAccountUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> None:
        self._users.delete(user_id)
        logger.info(f"users.delete_account: ok user_id={user_id}")
