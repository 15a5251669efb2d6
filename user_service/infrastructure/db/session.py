# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from user_service.shared.config import DatabaseConfig
from user_service.shared.logging import logger


class Base(DeclarativeBase):
    pass


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    url = config.sqlalchemy_url()
    kwargs: dict[str, object] = {"echo": False, "pool_pre_ping": True}

    if config.is_sqlite():
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        if url.database in (None, "", ":memory:"):
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )

    engine = create_engine(url, **kwargs)
    logger.info(f"db.engine: created for {url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    session = factory()
    logger.debug("db.session: opened")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed")
    except Exception:
        logger.debug("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        logger.debug("db.session: closed")


def init_db(engine: Engine) -> None:
    # Imported for its side effect of registering the tables on Base.metadata.
    from user_service.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")
