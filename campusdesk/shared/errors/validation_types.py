# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    MISSING = "missing"
    EMAIL_INVALID = "email_invalid"
    PASSWORD_TOO_SHORT = "password_too_short"
    PASSWORD_BLANK = "password_blank"


__all__ = ["ValidationErrorType"]
