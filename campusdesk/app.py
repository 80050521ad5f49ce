# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from campusdesk.infrastructure.container import Container, container
from campusdesk.infrastructure.db import init_db
from campusdesk.shared.config import load_config
from campusdesk.shared.logging import logger, setup_logging
from campusdesk.shared.middleware.error_handler import configure_error_handling
from campusdesk.shared.middleware.request_logger import configure_request_logging
from campusdesk.shared.middleware.session_auth import configure_session_auth


def create_app(deps: Container | None = None) -> Flask:
    config = load_config()
    deps = deps or container

    setup_logging(debug_mode=config.debug_logging)
    init_db()

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)

    configure_error_handling(app)
    configure_request_logging(app)
    configure_session_auth(app, deps.session_manager)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(deps.misc_controller.as_blueprint())
    app.register_blueprint(deps.auth_controller.as_blueprint())
    app.register_blueprint(deps.admissions_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
