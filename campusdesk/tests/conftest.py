from __future__ import annotations

import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="campusdesk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["APP_ENV"] = "test"
os.environ.pop("SESSION_TTL_SECONDS", None)
os.environ.pop("AUTH_COOKIE_NAME", None)

import pytest  # noqa: E402

from campusdesk.domain.users.entities import Session, User  # noqa: E402
from campusdesk.domain.users.repositories import (  # noqa: E402
    PasswordHasher,
    SessionRepository,
    UserRepository,
)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def add(self, user: User) -> User:
        new_user = User(
            id=f"user-{self._seq}",
            email=user.email,
            password_hash=user.password_hash,
            full_name=user.full_name,
            created_at=user.created_at,
        )
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user

    def remove(self, user_id: str) -> None:
        self._users.pop(user_id, None)


class InMemorySessionRepository(SessionRepository):
    def __init__(self, users: InMemoryUserRepository) -> None:
        self.rows: dict[str, Session] = {}
        self._users = users

    def create(self, user_id: str, token_hash: str, expires_at: datetime) -> Session:
        row = Session(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=datetime.now(UTC),
        )
        self.rows[token_hash] = row
        return row

    def find_by_token_hash(self, token_hash: str) -> Session | None:
        return self.rows.get(token_hash)

    def delete_by_token_hash(self, token_hash: str) -> None:
        self.rows.pop(token_hash, None)

    def delete_expired(self, now: datetime) -> int:
        expired = [key for key, row in self.rows.items() if row.expires_at <= now]
        for key in expired:
            del self.rows[key]
        return len(expired)

    def delete_orphaned(self) -> int:
        orphaned = [
            key for key, row in self.rows.items() if self._users.find_by_id(row.user_id) is None
        ]
        for key in orphaned:
            del self.rows[key]
        return len(orphaned)


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def sessions(users: InMemoryUserRepository) -> InMemorySessionRepository:
    return InMemorySessionRepository(users)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def reset_database():
    from campusdesk.infrastructure.db import ENGINE, Base
    from campusdesk.infrastructure.db import models  # noqa: F401

    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)
