# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Issue, validate and revoke cookie-bound login sessions."""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from campusdesk.domain.users.entities import Session, User
from campusdesk.domain.users.repositories import SessionRepository, UserRepository
from campusdesk.shared.logging import logger

TOKEN_BYTES = 32
DEFAULT_SESSION_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(slots=True, frozen=True)
class IssuedSession:
    token: str
    session: Session


@dataclass(slots=True, frozen=True)
class SessionValidation:
    """Outcome of resolving a bearer token.

    ``stale`` is set when a token was presented but no longer maps to a live
    session, so the caller should clear the cookie that carried it.
    """

    user: User | None = None
    stale: bool = False

    @property
    def authenticated(self) -> bool:
        return self.user is not None


ANONYMOUS = SessionValidation()
STALE = SessionValidation(stale=True)


class SessionManager:
    def __init__(
        self,
        *,
        sessions: SessionRepository,
        users: UserRepository,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sessions = sessions
        self._users = users
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: str) -> IssuedSession:
        token = secrets.token_hex(TOKEN_BYTES)
        expires_at = self._clock() + self._ttl
        session = self._sessions.create(user_id, hash_token(token), expires_at)
        logger.info(f"session.issue: user={user_id} exp={expires_at.isoformat()}")
        return IssuedSession(token=token, session=session)

    def validate(self, token: str | None) -> SessionValidation:
        if not token:
            return ANONYMOUS

        token_hash = hash_token(token)
        session = self._sessions.find_by_token_hash(token_hash)
        if session is None:
            logger.debug("session.validate: unknown token")
            return STALE

        if session.is_expired(self._clock()):
            logger.debug(f"session.validate: expired session for user={session.user_id}")
            return STALE

        user = self._users.find_by_id(session.user_id)
        if user is None:
            self._sessions.delete_by_token_hash(token_hash)
            logger.warning(f"session.validate: removed orphaned session for user={session.user_id}")
            return STALE

        return SessionValidation(user=user)

    def revoke(self, token: str | None) -> None:
        if not token:
            return
        self._sessions.delete_by_token_hash(hash_token(token))
        logger.info("session.revoke: ok")

    def sweep(self, now: datetime | None = None) -> int:
        """Delete expired and orphaned sessions; returns the number removed."""

        expired = self._sessions.delete_expired(now or self._clock())
        orphaned = self._sessions.delete_orphaned()
        logger.info(f"session.sweep: expired={expired} orphaned={orphaned}")
        return expired + orphaned


__all__ = [
    "DEFAULT_SESSION_TTL",
    "IssuedSession",
    "SessionManager",
    "SessionValidation",
    "hash_token",
]
