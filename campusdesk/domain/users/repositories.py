# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Session, User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def add(self, user: User) -> User: ...


class SessionRepository(Protocol):
    def create(self, user_id: str, token_hash: str, expires_at: datetime) -> Session: ...
    def find_by_token_hash(self, token_hash: str) -> Session | None: ...
    def delete_by_token_hash(self, token_hash: str) -> None: ...
    def delete_expired(self, now: datetime) -> int: ...
    def delete_orphaned(self) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
