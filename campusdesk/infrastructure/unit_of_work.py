# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction boundary shared by the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campusdesk.shared.errors.base import PersistenceError
from campusdesk.shared.logging import logger


@dataclass(slots=True)
class SqlAlchemyUnitOfWork:
    """One session, one transaction: commit on clean exit, roll back otherwise."""

    session_factory: Callable[[], Session]
    operation: str = "db"
    _session: Session | None = field(default=None, init=False)

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self.session
        try:
            if exc is None:
                session.commit()
            else:
                logger.debug(f"uow[{self.operation}]: rollback after {exc_type.__name__}")
                session.rollback()
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError(f"uow[{self.operation}]: session used outside its block")
        return self._session


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session], operation: str) -> Iterator[Session]:
    """Yield a transactional session for ``operation``.

    ``IntegrityError`` passes through untouched for constraint mapping; any
    other storage failure is logged and raised as ``PersistenceError``.
    """

    try:
        with SqlAlchemyUnitOfWork(factory, operation) as uow:
            yield uow.session
    except IntegrityError:
        raise
    except SQLAlchemyError as exc:
        logger.error(f"uow[{operation}]: {type(exc).__name__}: {exc}")
        raise PersistenceError(operation) from exc
