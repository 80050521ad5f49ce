# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, cast

from flask import Flask, Response, g, request

from campusdesk.domain.users.entities import User
from campusdesk.domain.users.exceptions import NotAuthenticatedError
from campusdesk.shared.config import load_config
from campusdesk.shared.errors.base import PersistenceError
from campusdesk.shared.logging import logger

if TYPE_CHECKING:
    from campusdesk.application.services.session_manager import SessionManager


def _presented_token() -> tuple[str, bool]:
    """Return the token and whether it came from the session cookie."""
    auth = request.headers.get("Authorization", "")
    bearer = auth[7:].strip() if auth.startswith("Bearer ") else ""
    if bearer:
        return bearer, False
    return request.cookies.get(load_config().session.cookie_name, ""), True


def read_session_token() -> str:
    return _presented_token()[0]


def set_session_cookie(response: Response, token: str) -> None:
    config = load_config()
    response.set_cookie(
        config.session.cookie_name,
        token,
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.cookie_secure(),
        max_age=config.session.ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    config = load_config()
    response.delete_cookie(
        config.session.cookie_name,
        path="/",
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.cookie_secure(),
    )


def current_user() -> User | None:
    return cast(User | None, g.get("user"))


def configure_session_auth(app: Flask, sessions: SessionManager) -> None:
    """Resolve the session cookie into ``g.user`` before any view runs.

    Store outages degrade to an anonymous request; routes that need an
    identity enforce it with ``auth_required``.
    """

    @app.before_request
    def _resolve_session() -> None:
        g.user = None
        g.user_id = None
        g.clear_session_cookie = False

        token, from_cookie = _presented_token()
        if not token:
            return

        try:
            result = sessions.validate(token)
        except PersistenceError:
            logger.exception(
                f"auth: session lookup failed on {request.method} {request.path}, "
                "continuing anonymously"
            )
            return

        if result.user is not None:
            g.user = result.user
            g.user_id = result.user.id
            logger.debug(f"auth: ok user={result.user.id} {request.method} {request.path}")
        elif result.stale and from_cookie:
            g.clear_session_cookie = True

    @app.after_request
    def _drop_stale_cookie(response: Response) -> Response:
        if g.get("clear_session_cookie"):
            clear_session_cookie(response)
        return response


def auth_required(f: Callable):
    @wraps(f)
    def inner(*args, **kwargs):
        if current_user() is None:
            logger.warning(
                f"auth: rejected anonymous {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
            raise NotAuthenticatedError()
        return f(*args, **kwargs)

    return inner


__all__ = [
    "auth_required",
    "clear_session_cookie",
    "configure_session_auth",
    "current_user",
    "read_session_token",
    "set_session_cookie",
]
