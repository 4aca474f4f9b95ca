from __future__ import annotations

from http import HTTPStatus

from flask import Flask, request

from ..common.http import json_body, outcome_response
from ..common.validators import optional_date, optional_datetime, optional_uuid, require_uuid
from ..container import Container


def _record_dict(record):
    return record.to_dict()


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _event_args():
        body = json_body()
        return (
            require_uuid(body.get("employeeId"), "employeeId"),
            optional_datetime(body.get("occurredAt"), "occurredAt"),
        )

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def attendance_check_in():
        employee_id, occurred_at = _event_args()
        outcome = service.check_in(employee_id, occurred_at=occurred_at)
        return outcome_response(outcome, _record_dict, status=HTTPStatus.CREATED)

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def attendance_check_out():
        employee_id, occurred_at = _event_args()
        outcome = service.check_out(employee_id, occurred_at=occurred_at)
        return outcome_response(outcome, _record_dict)

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        outcome = service.find_all(
            employee_id=optional_uuid(request.args.get("employeeId"), "employeeId"),
            date_from=optional_date(request.args.get("dateFrom"), "dateFrom"),
            date_to=optional_date(request.args.get("dateTo"), "dateTo"),
        )
        return outcome_response(outcome, lambda rows: [r.to_dict() for r in rows])
