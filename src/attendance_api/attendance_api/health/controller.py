from __future__ import annotations

from http import HTTPStatus

from flask import Flask

from ..auth.guard import public
from ..common.http import envelope, error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    @public
    def health():
        result = container.health_service.check()
        if not result.ok:
            return error_response(
                HTTPStatus.SERVICE_UNAVAILABLE,
                "Dependency health check failed",
                details=result.to_dict()["checks"],
            )
        return envelope(result.to_dict())
