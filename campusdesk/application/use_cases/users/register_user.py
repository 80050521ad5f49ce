# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from campusdesk.application.services.session_manager import IssuedSession, SessionManager
from campusdesk.domain.users.entities import User
from campusdesk.domain.users.exceptions import UserAlreadyExistsError
from campusdesk.domain.users.repositories import PasswordHasher, UserRepository


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionManager,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher

    def execute(
        self, email: str, password: str, full_name: str | None = None
    ) -> tuple[User, IssuedSession]:
        email = email.strip().lower()
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()
        hashed = self._password_hasher.hash(password)
        user = User(
            id="",
            email=email,
            password_hash=hashed,
            full_name=full_name,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)
        return persisted, self._sessions.issue(persisted.id)
