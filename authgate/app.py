# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from authgate.container import Container
from authgate.infrastructure.db import init_db
from authgate.shared.logging import logger, setup_logging
from authgate.shared.middleware.error_handler import configure_error_handling
from authgate.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(
        level="DEBUG" if config.debug_logging else config.log_level,
        log_file=config.log_file,
    )
    init_db(container.engine)

    app = Flask(__name__)
    app.extensions["authgate.container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(
        app,
        debug_mode=config.debug_logging,
        trust_proxy=config.security.trust_proxy_headers,
    )

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.profile_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"authgate app initialized env={config.app_env}")
    return app


def main() -> None:
    create_app().run(host="0.0.0.0", port=5000)


if __name__ == "__main__":
    main()
