# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from campusdesk.shared.config import load_config
from campusdesk.shared.config.settings import DatabaseConfig
from campusdesk.shared.logging import logger


class Base(DeclarativeBase):
    pass


def build_engine(db: DatabaseConfig) -> Engine:
    if db.url.startswith("sqlite"):
        # SQLite ignores pool sizing; the timeout is the busy-wait on a locked file.
        options: dict[str, object] = {
            "connect_args": {"check_same_thread": False, "timeout": db.pool_timeout}
        }
    else:
        options = {
            "pool_size": db.pool_size,
            "max_overflow": db.max_overflow,
            "pool_timeout": db.pool_timeout,
        }
    return create_engine(db.url, pool_pre_ping=True, **options)


ENGINE: Engine = build_engine(load_config().database)

SessionLocal = scoped_session(sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False))


@contextmanager
def session_scope() -> Iterator[Session]:
    """Thread-scoped session committed on exit; used by best-effort writers."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        SessionLocal.remove()


def init_db() -> None:
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info(f"db: schema ready on {ENGINE.url.render_as_string(hide_password=True)}")
