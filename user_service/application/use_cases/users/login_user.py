# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from user_service.domain.users.entities import IssuedToken, User
from user_service.domain.users.exceptions import InvalidCredentialsError
from user_service.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from user_service.shared.logging import logger

_DUMMY_PASSWORD = "timing-equaliser-Password1"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._clock = clock
        self._dummy_hash: str | None = None

    def execute(self, email: str, password: str) -> tuple[User, IssuedToken]:
        user = self._users.find_by_email(email)
        if user is None:
            # Unknown emails pay for one verification too.
            self._password_hasher.verify(password, self._get_dummy_hash())
            logger.info("users.login: rejected")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"users.login: rejected user_id={user.id}")
            raise InvalidCredentialsError()

        if self._password_hasher.needs_rehash(user.password_hash):
            user = self._users.update(
                user.with_password_hash(self._password_hasher.hash(password), at=self._clock())
            )
            logger.info(f"users.login: password rehashed user_id={user.id}")

        token = self._tokens.issue(user.id, user.email)
        logger.info(f"users.login: ok user_id={user.id}")
        return user, token

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash
