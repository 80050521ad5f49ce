# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    """Error with a stable machine-readable ``code`` and an HTTP status.

    Rendered as ``{"error": code}`` plus ``"context"`` when there is any.
    """

    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code}
        if self.context:
            body["context"] = dict(self.context)
        return body


class DomainError(AppError):
    """Rule violation surfaced to the client; subclasses pin code and status."""

    default_code: ClassVar[str] = "domain_error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(self.default_code, self.default_status, context)


class InfrastructureError(AppError):
    """A backing service failed; the client only ever sees ``internal_error``."""

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__("internal_error", HTTPStatus.INTERNAL_SERVER_ERROR, context)


class PersistenceError(InfrastructureError):
    def __init__(self, operation: str) -> None:
        super().__init__()
        self.operation = operation


class ValidationError(AppError):
    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__("validation_error", HTTPStatus.BAD_REQUEST, context)
