# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from campusdesk.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    default_code = "user_already_exists"


class InvalidCredentialsError(DomainError):
    """Raised for unknown email and wrong password alike."""

    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED

    def __init__(self, reason: str = "mismatch") -> None:
        super().__init__()
        # Kept for the audit trail only; never rendered to the client.
        self.reason = reason


class NotAuthenticatedError(DomainError):
    default_code = "not_authenticated"
    default_status = HTTPStatus.UNAUTHORIZED


class MalformedPasswordHashError(ValueError):
    pass
