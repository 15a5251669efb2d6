# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, Response
from flask_cors import CORS

from user_service.infrastructure.container import Container
from user_service.infrastructure.db import init_db
from user_service.shared.config import AppConfig, load_config
from user_service.shared.logging import logger, setup_logging
from user_service.shared.middleware.error_handler import configure_error_handling
from user_service.shared.middleware.request_logger import configure_request_logging


def _configure_security_headers(app: Flask, *, enable_hsts: bool) -> None:
    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")
        resp.headers.setdefault("Cache-Control", "no-store")

        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return resp


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    setup_logging(
        "DEBUG" if config.debug_logging else config.log_level,
        log_file=config.log_file,
    )

    if config.database.auto_migrate:
        init_db(container.engine)

    app = Flask(__name__)
    app.json.sort_keys = False
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    CORS(app, resources={r"/api/*": {"origins": config.allowed_origins()}})

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())

    _configure_security_headers(app, enable_hsts=config.enable_hsts)

    app.extensions["user_service.container"] = container

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


def main() -> None:
    config = load_config()
    app = create_app(config)
    app.run(host=config.host, port=config.port, debug=False)


if __name__ == "__main__":
    main()
