# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from campusdesk.shared.config import load_config
from campusdesk.shared.logging import logger

from .base import AppError, InfrastructureError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def _where() -> str:
    return f"{request.method} {request.path} user={g.get('user_id') or 'anonymous'}"


def register_error_handler(app: Flask) -> None:
    """Map every exception leaving a view onto a JSON body.

    Infrastructure failures are logged with their cause and answered with the
    generic ``internal_error`` code; nothing about the cause reaches the client.
    """

    verbose = load_config().debug_logging

    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        if isinstance(exc, InfrastructureError):
            logger.error(f"{exc.code} during {_where()}: {exc.__cause__!r}")
        else:
            logger.info(f"{exc.code} ({int(exc.status)}) for {_where()}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        if verbose:
            logger.exception(f"unhandled {type(exc).__name__} during {_where()}")
        else:
            logger.error(f"unhandled {type(exc).__name__} during {_where()}")
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR
