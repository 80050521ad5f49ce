# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into ``{"fields": [...], "errors": [...]}``.

    Field names are the request keys as the client sent them (aliases).
    """

    errors = []
    for item in exc.errors(include_url=False, include_input=False):
        entry: dict[str, Any] = {
            "field": _field_name(item["loc"]),
            "type": item["type"],
            "message": item["msg"],
        }
        if item.get("ctx"):
            entry["ctx"] = {key: str(value) for key, value in item["ctx"].items()}
        errors.append(entry)

    return {"fields": sorted({entry["field"] for entry in errors}), "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(format_pydantic_errors(exc)) from exc


__all__ = ["format_pydantic_errors", "raise_validation_error"]
