# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as OrmSession

from campusdesk.domain.users.entities import Session as DomainSession
from campusdesk.domain.users.entities import User as DomainUser
from campusdesk.domain.users.exceptions import UserAlreadyExistsError
from campusdesk.domain.users.repositories import SessionRepository, UserRepository
from campusdesk.infrastructure.db.models import AuthSession, User
from campusdesk.infrastructure.unit_of_work import unit_of_work_scope


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        full_name=row.full_name,
        created_at=_aware(row.created_at),
    )


def _to_domain_session(row: AuthSession) -> DomainSession:
    return DomainSession(
        user_id=row.user_id,
        token_hash=row.token_hash,
        expires_at=_aware(row.expires_at),
        created_at=_aware(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], OrmSession]):
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "users.find_by_email") as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "users.find_by_id") as session:
            row = session.get(User, user_id)
            return _to_domain_user(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory, "users.add") as session:
                row = User(
                    email=user.email,
                    password_hash=user.password_hash,
                    full_name=user.full_name,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain_user(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc


class SqlAlchemySessionRepository(SessionRepository):
    def __init__(self, session_factory: Callable[[], OrmSession]):
        self._session_factory = session_factory

    def create(self, user_id: str, token_hash: str, expires_at: datetime) -> DomainSession:
        with unit_of_work_scope(self._session_factory, "sessions.create") as session:
            row = AuthSession(
                user_id=user_id,
                token_hash=token_hash,
                expires_at=expires_at,
                created_at=datetime.now(UTC),
            )
            session.add(row)
            session.flush()
            return _to_domain_session(row)

    def find_by_token_hash(self, token_hash: str) -> DomainSession | None:
        with unit_of_work_scope(self._session_factory, "sessions.find") as session:
            row = session.scalars(
                select(AuthSession).where(AuthSession.token_hash == token_hash)
            ).first()
            return _to_domain_session(row) if row else None

    def delete_by_token_hash(self, token_hash: str) -> None:
        with unit_of_work_scope(self._session_factory, "sessions.delete") as session:
            session.execute(
                delete(AuthSession)
                .where(AuthSession.token_hash == token_hash)
                .execution_options(synchronize_session=False)
            )

    def delete_expired(self, now: datetime) -> int:
        with unit_of_work_scope(self._session_factory, "sessions.delete_expired") as session:
            result = session.execute(
                delete(AuthSession)
                .where(AuthSession.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            return int(result.rowcount or 0)

    def delete_orphaned(self) -> int:
        with unit_of_work_scope(self._session_factory, "sessions.delete_orphaned") as session:
            known_users = select(User.id)
            result = session.execute(
                delete(AuthSession)
                .where(AuthSession.user_id.not_in(known_users))
                .execution_options(synchronize_session=False)
            )
            return int(result.rowcount or 0)
