from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(error: DomainError) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status
    return 400


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return fail(str(e), status_for(e))

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)
