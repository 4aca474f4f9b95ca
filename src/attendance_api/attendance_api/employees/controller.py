from __future__ import annotations

from http import HTTPStatus

from flask import Flask, request

from ..common.http import envelope, json_body
from ..common.validators import require_positive_int, require_uuid
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/employees", methods=["POST"], endpoint="employees_create")
    def employees_create():
        body = json_body()
        employee = service.create(
            names=body.get("names"),
            email=body.get("email"),
            employee_identifier=body.get("employeeIdentifier"),
            phone_number=body.get("phoneNumber"),
        )
        return envelope(employee.to_dict(), status=HTTPStatus.CREATED)

    @app.route("/employees", methods=["GET"], endpoint="employees_list")
    def employees_list():
        page = require_positive_int(request.args.get("page"), "page", default=DEFAULT_PAGE)
        limit = require_positive_int(
            request.args.get("limit"), "limit", default=DEFAULT_PAGE_LIMIT, maximum=MAX_PAGE_LIMIT
        )
        result = service.list(page=page, limit=limit)
        return envelope(
            [e.to_dict() for e in result.data],
            meta={"page": result.page, "limit": result.limit, "total": result.total},
        )

    @app.route("/employees/<employee_id>", methods=["GET"], endpoint="employees_get")
    def employees_get(employee_id: str):
        employee = service.get(require_uuid(employee_id, "id"))
        return envelope(employee.to_dict())

    @app.route("/employees/<employee_id>", methods=["PATCH"], endpoint="employees_update")
    def employees_update(employee_id: str):
        body = json_body()
        employee = service.update(
            require_uuid(employee_id, "id"),
            names=body.get("names"),
            email=body.get("email"),
            employee_identifier=body.get("employeeIdentifier"),
            phone_number=body.get("phoneNumber"),
        )
        return envelope(employee.to_dict())

    @app.route("/employees/<employee_id>", methods=["DELETE"], endpoint="employees_delete")
    def employees_delete(employee_id: str):
        service.delete(require_uuid(employee_id, "id"))
        return "", HTTPStatus.NO_CONTENT
