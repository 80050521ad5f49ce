# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from campusdesk.shared.logging import logger


class AuditAction(str, Enum):
    SIGNUP = "signup"
    LOGIN = "login"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"


def audit_log(
    action: AuditAction,
    user_id: str | None = None,
    *,
    email: str | None = None,
    user_name: str | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    """Record an auth event in the log and in ``user_events``.

    ``details`` lands in ``metadata_json`` and is for operators only.
    """

    log_message = (
        f"AUDIT: {action.value} | "
        f"user_id={user_id} | "
        f"ip={ip_address} | "
        f"success={success}"
    )
    if details:
        log_message += f" | details={details}"

    if success:
        logger.info(log_message)
    else:
        logger.warning(log_message)

    _store_user_event(
        action=action.value,
        user_id=user_id,
        email=email,
        user_name=user_name,
        ip_address=ip_address,
        details=details,
    )


def _store_user_event(
    *,
    action: str,
    user_id: str | None,
    email: str | None,
    user_name: str | None,
    ip_address: str | None,
    details: dict[str, Any] | None,
) -> None:
    from campusdesk.infrastructure.db.models import UserEvent
    from campusdesk.infrastructure.db.session import session_scope

    try:
        with session_scope() as db:
            db.add(
                UserEvent(
                    user_id=user_id,
                    event_type=action,
                    user_email=email,
                    user_name=user_name,
                    ip_address=ip_address,
                    metadata_json=json.dumps(details) if details else None,
                )
            )
    except SQLAlchemyError as db_error:
        logger.warning(f"Failed to store user event {action}: {type(db_error).__name__}")


__all__ = ["AuditAction", "audit_log"]
