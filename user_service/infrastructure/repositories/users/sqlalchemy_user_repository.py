# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from user_service.domain.users.entities import User
from user_service.domain.users.exceptions import EmailAlreadyExistsError, UserNotFoundError
from user_service.domain.users.repositories import UserRepository
from user_service.infrastructure.db.models import UserRow
from user_service.infrastructure.db.session import session_scope
from user_service.shared.logging import logger

_PG_UNIQUE_VIOLATION = "23505"
_SQLITE_CONSTRAINT_UNIQUE = 2067
_MYSQL_DUPLICATE_ENTRY = 1062


def is_unique_violation(exc: IntegrityError) -> bool:
    """Match on driver error codes, never on the (locale dependent) message text."""

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlite_errorcode", None) == _SQLITE_CONSTRAINT_UNIQUE:
        return True
    args = getattr(orig, "args", ())
    return bool(args) and args[0] == _MYSQL_DUPLICATE_ENTRY


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        name=row.name,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, user: User) -> User:
        user_id = user.id or str(uuid.uuid4())
        try:
            with session_scope(self._session_factory) as session:
                row = UserRow(
                    id=user_id,
                    email=user.email,
                    password_hash=user.password_hash,
                    name=user.name,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info("users.repository: duplicate email on insert")
                raise EmailAlreadyExistsError() from exc
            raise

    def find_by_id(self, user_id: str) -> User | None:
        with session_scope(self._session_factory) as session:
            row = (
                session.query(UserRow)
                .filter(UserRow.id == user_id, UserRow.deleted_at.is_(None))
                .first()
            )
            if not row:
                return None
            return _to_domain(row)

    def find_by_email(self, email: str) -> User | None:
        with session_scope(self._session_factory) as session:
            row = (
                session.query(UserRow)
                .filter(UserRow.email == email, UserRow.deleted_at.is_(None))
                .first()
            )
            if not row:
                return None
            return _to_domain(row)

    def update(self, user: User) -> User:
        try:
            with session_scope(self._session_factory) as session:
                row = self._get_live_row(session, user.id)
                row.email = user.email
                row.name = user.name
                row.password_hash = user.password_hash
                row.updated_at = user.updated_at
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info(f"users.repository: duplicate email on update user_id={user.id}")
                raise EmailAlreadyExistsError() from exc
            raise

    def delete(self, user_id: str) -> None:
        with session_scope(self._session_factory) as session:
            row = self._get_live_row(session, user_id)
            now = datetime.now(UTC)
            row.deleted_at = now
            row.updated_at = now

    @staticmethod
    def _get_live_row(session: Session, user_id: str) -> UserRow:
        row = session.get(UserRow, user_id)
        if row is None or row.deleted_at is not None:
            raise UserNotFoundError()
        return row
