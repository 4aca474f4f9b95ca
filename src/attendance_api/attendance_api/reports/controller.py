from __future__ import annotations

from flask import Flask, request

from ..common.http import envelope
from ..common.validators import require_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.daily_report_service

    @app.route("/reports/attendance/daily", methods=["GET"], endpoint="reports_daily")
    def reports_daily():
        work_date = require_date(request.args.get("date"), "date")
        rows = service.build(work_date)
        return envelope([r.to_dict() for r in rows], meta={"date": request.args.get("date")})

    @app.route("/reports/attendance/daily.csv", methods=["GET"], endpoint="reports_daily_csv")
    def reports_daily_csv():
        work_date = require_date(request.args.get("date"), "date")
        return app.response_class(
            service.to_csv(work_date),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={service.csv_filename(work_date)}"},
        )
