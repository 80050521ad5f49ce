# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: str
    email: str
    password_hash: str
    created_at: datetime
    full_name: str | None = None


@dataclass(slots=True, frozen=True)
class Session:
    """Persisted proof of authentication; only the token digest is kept."""

    user_id: str
    token_hash: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
