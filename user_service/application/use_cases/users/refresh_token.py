# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from user_service.domain.users.entities import IssuedToken
from user_service.domain.users.exceptions import InvalidTokenError
from user_service.domain.users.repositories import TokenService, UserRepository
from user_service.shared.logging import logger


class RefreshTokenUseCase:
    """Re-issues a session token without asking for the password again."""

    def __init__(self, *, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, token: str) -> IssuedToken:
        refreshed = self._tokens.refresh(token)

        user = self._users.find_by_id(refreshed.claims.user_id)
        if user is None:
            logger.info(f"users.refresh_token: subject gone user_id={refreshed.claims.user_id}")
            raise InvalidTokenError()

        if user.email != refreshed.claims.email:
            refreshed = self._tokens.issue(user.id, user.email)

        logger.info(f"users.refresh_token: ok user_id={user.id}")
        return refreshed
