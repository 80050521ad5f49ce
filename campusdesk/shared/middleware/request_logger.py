# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from campusdesk.shared.config import load_config
from campusdesk.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

_HIDDEN_QUERY_KEYS = ("password", "token", "secret")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _visible_query() -> dict[str, str]:
    return {
        key: "<hidden>" if any(word in key.lower() for word in _HIDDEN_QUERY_KEYS) else value
        for key, value in request.args.items()
    }


def _elapsed_ms() -> float:
    started = g.get("request_started_at")
    if started is None:
        return 0.0
    return (time.perf_counter() - started) * 1000


def configure_request_logging(app: Flask) -> None:
    """Tag every request with an id and log one line in and one line out."""

    verbose = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(6)
        set_correlation_id(request_id)
        g.request_id = request_id
        g.request_started_at = time.perf_counter()

        if verbose:
            logger.debug(
                f"-> {request.method} {request.path} ip={_client_ip()} "
                f"query={_visible_query()} bytes={request.content_length or 0} "
                f"has_cookie={bool(request.cookies)}"
            )
        else:
            logger.info(f"-> {request.method} {request.path} ip={_client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, g.get("request_id", "-"))
        logger.info(
            f"<- {request.method} {request.path} {response.status_code} "
            f"{_elapsed_ms():.1f}ms user={g.get('user_id') or 'anonymous'}"
        )
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.opt(exception=exc if verbose else None).error(
                f"request aborted: {type(exc).__name__} on {request.method} {request.path}"
            )
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
