# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Session, User
from .exceptions import (
    InvalidCredentialsError,
    MalformedPasswordHashError,
    NotAuthenticatedError,
    UserAlreadyExistsError,
)
from .repositories import PasswordHasher, SessionRepository, UserRepository

__all__ = [
    "InvalidCredentialsError",
    "MalformedPasswordHashError",
    "NotAuthenticatedError",
    "PasswordHasher",
    "Session",
    "SessionRepository",
    "User",
    "UserAlreadyExistsError",
    "UserRepository",
]
