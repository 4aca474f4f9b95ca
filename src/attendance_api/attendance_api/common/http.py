"""JSON envelope helpers shared by all controllers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.enums import OutcomeKind
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..core.result import Outcome

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    OutcomeKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    OutcomeKind.CONFLICT: HTTPStatus.CONFLICT,
    OutcomeKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(data: Any, *, status: int = HTTPStatus.OK, meta: Optional[dict] = None):
    body_meta = dict(meta or {})
    body_meta.setdefault("timestamp", _timestamp())
    return jsonify({"data": data, "meta": body_meta, "errors": None}), int(status)


def error_response(status: int, message: str, details: Any = None):
    status = HTTPStatus(status)
    error: dict[str, Any] = {"code": status.name, "message": message}
    if details is not None:
        error["details"] = details
    body = {
        "data": None,
        "meta": {
            "statusCode": status.value,
            "timestamp": _timestamp(),
            "path": request.path,
            "method": request.method,
        },
        "errors": [error],
    }
    return jsonify(body), status.value


def outcome_response(outcome: Outcome, serialize, *, status: int = HTTPStatus.OK):
    """Translate a service ``Outcome`` into an HTTP response."""
    if outcome.kind == OutcomeKind.OK:
        return envelope(serialize(outcome.value), status=status)
    return error_response(_STATUS_BY_KIND[outcome.kind], outcome.message or "")


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return error_response(HTTPStatus.BAD_REQUEST, str(e))

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return error_response(HTTPStatus.NOT_FOUND, str(e))

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return error_response(HTTPStatus.CONFLICT, str(e))

    @app.errorhandler(AuthenticationError)
    def _unauthorized(e: AuthenticationError):
        return error_response(HTTPStatus.UNAUTHORIZED, str(e))

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return error_response(HTTPStatus.FORBIDDEN, str(e))

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return error_response(e.code or HTTPStatus.INTERNAL_SERVER_ERROR, e.description or e.name)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        logger.exception("%s %s failed", request.method, request.path)
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
