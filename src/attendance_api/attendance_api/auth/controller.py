from __future__ import annotations

from http import HTTPStatus

from flask import Flask
from flask_jwt_extended import get_jwt_identity

from ..common.http import envelope, json_body
from ..container import Container
from .guard import public


def register(app: Flask, container: Container) -> None:
    service = container.auth_service

    @app.route("/auth/register", methods=["POST"], endpoint="auth_register")
    @public
    def auth_register():
        body = json_body()
        tokens = service.register(email=body.get("email"), password=body.get("password"), role=body.get("role"))
        return envelope(tokens.to_dict(), status=HTTPStatus.CREATED)

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    @public
    def auth_login():
        body = json_body()
        tokens = service.login(email=body.get("email"), password=body.get("password"))
        return envelope(tokens.to_dict())

    @app.route("/auth/refresh", methods=["POST"], endpoint="auth_refresh")
    @public
    def auth_refresh():
        tokens = service.refresh(json_body().get("refreshToken"))
        return envelope(tokens.to_dict())

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        service.logout(get_jwt_identity())
        return envelope({"message": "Logged out successfully"})

    @app.route("/auth/profile", methods=["GET"], endpoint="auth_profile")
    def auth_profile():
        return envelope(service.get_profile(get_jwt_identity()))

    @app.route("/auth/forgot-password", methods=["POST"], endpoint="auth_forgot_password")
    @public
    def auth_forgot_password():
        service.forgot_password(json_body().get("email"))
        return envelope({"message": "If the email exists, a reset link will be sent"})

    @app.route("/auth/reset-password", methods=["POST"], endpoint="auth_reset_password")
    @public
    def auth_reset_password():
        body = json_body()
        service.reset_password(token=body.get("token"), new_password=body.get("newPassword"))
        return envelope({"message": "Password reset successfully"})
