# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from user_service.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_REQUEST_ID_LENGTH = 64


def _get_client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return request.remote_addr or "unknown"


def _get_user_id() -> str | None:
    return getattr(g, "user_id", None)


def _auth_scheme() -> str:
    # Only the scheme; the credential itself never reaches the log.
    header = request.headers.get("Authorization", "")
    return header.split(" ", 1)[0] if header else "none"


def _incoming_request_id() -> str | None:
    value = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if not value or len(value) > _MAX_REQUEST_ID_LENGTH or not value.isprintable():
        return None
    return value


def _log_request_start(debug_mode: bool) -> None:
    if debug_mode:
        logger.info(
            f"Request started: {request.method} {request.path} "
            f"from {_get_client_ip()}, auth={_auth_scheme()}, "
            f"content_length={request.content_length or 0}"
        )
    else:
        logger.info(f"Request: {request.method} {request.path} from {_get_client_ip()}")


def _log_request_end(debug_mode: bool, status_code: int, start_time: float) -> None:
    duration = time.perf_counter() - start_time

    if debug_mode:
        logger.info(
            f"Request completed: {request.method} {request.path} "
            f"status={status_code}, duration={duration:.3f}s, user={_get_user_id()}"
        )
    else:
        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={status_code}, duration={duration:.3f}s"
        )


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Correlation ids plus one start and one end line per request."""

    @app.before_request
    def _before_request() -> None:
        correlation_id = _incoming_request_id() or secrets.token_urlsafe(8)
        g.correlation_id = correlation_id
        set_correlation_id(correlation_id)
        g.request_start_time = time.perf_counter()

        _log_request_start(debug_mode)

    @app.after_request
    def _after_request(response: Response) -> Response:
        start_time = getattr(g, "request_start_time", time.perf_counter())
        _log_request_end(debug_mode, response.status_code, start_time)

        correlation_id = getattr(g, "correlation_id", None)
        if correlation_id:
            response.headers.setdefault(REQUEST_ID_HEADER, correlation_id)
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            if debug_mode:
                logger.opt(exception=exc).error(
                    f"Request error: {request.method} {request.path} user={_get_user_id()}"
                )
            else:
                logger.error(
                    f"Request error: {type(exc).__name__} on "
                    f"{request.method} {request.path}"
                )

        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
