# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens (JWT) carrying the user id and email."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from user_service.domain.users.entities import IssuedToken, TokenClaims
from user_service.domain.users.exceptions import InvalidTokenError
from user_service.domain.users.repositories import TokenService
from user_service.shared.logging import logger

_REQUIRED_CLAIMS = ["sub", "email", "iat", "exp", "iss"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """
    Issues and checks HMAC-signed JWTs.

    Every verification failure (bad signature, wrong algorithm or issuer,
    expiry, missing claims, garbage input) is reported as the same
    ``InvalidTokenError`` so callers cannot tell which check failed.
    """

    def __init__(
        self,
        *,
        secret: str,
        expiration: timedelta,
        refresh_grace: timedelta = timedelta(0),
        algorithm: str = "HS256",
        issuer: str = "user-service",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._expiration = expiration
        self._refresh_grace = refresh_grace
        self._algorithm = algorithm
        self._issuer = issuer
        self._clock = clock

    def issue(self, user_id: str, email: str) -> IssuedToken:
        # JWT NumericDate has one-second resolution
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._expiration
        payload = {
            "sub": user_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self._issuer,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        claims = TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        return IssuedToken(token=token, claims=claims)

    def validate(self, token: str) -> TokenClaims:
        return self._claims_from(self._decode(token, leeway=timedelta(0)))

    def refresh(self, token: str) -> IssuedToken:
        claims = self._claims_from(self._decode(token, leeway=self._refresh_grace))
        return self.issue(claims.user_id, claims.email)

    def _decode(self, token: str, *, leeway: timedelta) -> dict[str, Any]:
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError as exc:
            logger.debug(f"tokens.decode: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        self._check_expiry(payload, leeway)
        return payload

    def _check_expiry(self, payload: dict[str, Any], leeway: timedelta) -> None:
        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidTokenError() from exc
        if self._clock() >= expires_at + leeway:
            logger.debug("tokens.decode: rejected (expired)")
            raise InvalidTokenError()

    @staticmethod
    def _claims_from(payload: dict[str, Any]) -> TokenClaims:
        user_id = payload.get("sub")
        email = payload.get("email")
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            raise InvalidTokenError()
        try:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidTokenError() from exc
        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
