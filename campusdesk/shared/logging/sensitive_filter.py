# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction of credentials before a log record reaches any sink."""

from __future__ import annotations

import re
from typing import Any, NamedTuple

REDACTED = "***"


class _Rule(NamedTuple):
    pattern: re.Pattern[str]
    replacement: str


def _rule(expr: str, replacement: str, flags: int = re.IGNORECASE) -> _Rule:
    return _Rule(re.compile(expr, flags), replacement)


# Order matters: werkzeug hashes contain "$" segments the generic rules would split.
_RULES: tuple[_Rule, ...] = (
    _rule(r"\b(scrypt|pbkdf2):[0-9:a-z]+\$[^\s$]+\$[0-9a-f]+", rf"\1:{REDACTED}"),
    _rule(r"\b(bearer\s+)[\w.\-]{16,}", rf"\1{REDACTED}"),
    _rule(r"\b(auth_token|token|session)(\s*[:=]\s*['\"]?)[\w.\-]{16,}", rf"\1\2{REDACTED}"),
    _rule(r"\b(password|passwd|pwd)(\s*[:=]\s*['\"]?)[^\s'\",}]+", rf"\1\2{REDACTED}"),
    _rule(r"\b(secret_key|secret)(\s*[:=]\s*['\"]?)[^\s'\",}]+", rf"\1\2{REDACTED}"),
    _rule(r"\b([a-z+]+://[^:/\s]+:)[^@\s]+@", rf"\1{REDACTED}@"),
    # Session tokens are 64 hex chars; catch them even without a key in front.
    _rule(r"\b[0-9a-f]{64}\b", REDACTED, 0),
)


def sanitize_message(message: str) -> str:
    for rule in _RULES:
        message = rule.pattern.sub(rule.replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> None:
    """loguru patcher: rewrites the message in place."""
    record["message"] = sanitize_message(record["message"])


__all__ = ["REDACTED", "sanitize_message", "sanitize_record"]
