# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from campusdesk.application.services.session_manager import IssuedSession, SessionManager
from campusdesk.domain.users.entities import User
from campusdesk.domain.users.exceptions import InvalidCredentialsError, MalformedPasswordHashError
from campusdesk.domain.users.repositories import PasswordHasher, UserRepository
from campusdesk.shared.logging import logger


class LoginUserUseCase:
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
        self._decoy_hash: str | None = None

    def _decoy(self) -> str:
        # Burn the same hashing cost for unknown emails as for wrong passwords.
        if self._decoy_hash is None:
            self._decoy_hash = self._password_hasher.hash("decoy-password")
        return self._decoy_hash

    def execute(self, email: str, password: str) -> tuple[User, IssuedSession]:
        user = self._users.find_by_email(email.strip().lower())
        if user is None:
            self._password_hasher.verify(password, self._decoy())
            raise InvalidCredentialsError("unknown_email")

        try:
            valid = self._password_hasher.verify(password, user.password_hash)
        except MalformedPasswordHashError:
            logger.error(f"auth.login: stored password hash is malformed for user={user.id}")
            raise InvalidCredentialsError("malformed_hash") from None
        if not valid:
            raise InvalidCredentialsError("wrong_password")

        return user, self._sessions.issue(user.id)
