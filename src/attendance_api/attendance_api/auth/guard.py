"""Access-token guard applied to every route not marked ``@public``."""

from __future__ import annotations

from datetime import timedelta
from http import HTTPStatus

from flask import Flask, request
from flask_jwt_extended import JWTManager, verify_jwt_in_request

from ..common.http import error_response
from ..core.constants import JWT_ACCESS_EXPIRES_MINUTES, JWT_REFRESH_EXPIRES_DAYS


def public(view):
    view.is_public = True
    return view


def init_auth(app: Flask, settings) -> JWTManager:
    app.config["JWT_SECRET_KEY"] = getattr(settings, "JWT_SECRET_KEY", None) or getattr(settings, "SECRET_KEY")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(
        minutes=int(getattr(settings, "JWT_ACCESS_EXPIRES_MINUTES", JWT_ACCESS_EXPIRES_MINUTES))
    )
    app.config["JWT_REFRESH_TOKEN_EXPIRES"] = timedelta(
        days=int(getattr(settings, "JWT_REFRESH_EXPIRES_DAYS", JWT_REFRESH_EXPIRES_DAYS))
    )
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]

    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return error_response(HTTPStatus.UNAUTHORIZED, reason)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return error_response(HTTPStatus.UNAUTHORIZED, reason)

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return error_response(HTTPStatus.UNAUTHORIZED, "Token has expired")

    @app.before_request
    def _require_access_token():
        if request.method == "OPTIONS" or request.endpoint is None:
            return None
        view = app.view_functions.get(request.endpoint)
        if view is None or getattr(view, "is_public", False):
            return None
        verify_jwt_in_request()
        return None

    return jwt
