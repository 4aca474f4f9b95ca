from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_date
from ..core.enums import DailyStatus
from ..employees.repository import EmployeeRepository

CSV_FIELDS = ["names", "employee_identifier", "check_in", "check_out", "status"]


@dataclass(frozen=True)
class DailyReportRow:
    names: str
    employee_identifier: str
    check_in_at: Optional[datetime]
    check_out_at: Optional[datetime]
    status: DailyStatus

    def to_dict(self) -> dict:
        return {
            "names": self.names,
            "employeeIdentifier": self.employee_identifier,
            "checkInAt": self.check_in_at.isoformat() if self.check_in_at else None,
            "checkOutAt": self.check_out_at.isoformat() if self.check_out_at else None,
            "status": self.status.value,
        }


def compute_status(record: Optional[AttendanceRecord]) -> DailyStatus:
    if record is None:
        return DailyStatus.ABSENT
    if record.check_out_at is not None:
        return DailyStatus.LEFT
    return DailyStatus.PRESENT


class DailyReportService:
    def __init__(self, employees: EmployeeRepository, attendance: AttendanceRepository):
        self._employees = employees
        self._attendance = attendance

    def build(self, work_date: date) -> list[DailyReportRow]:
        by_employee = {r.employee_id: r for r in self._attendance.list_for_date(work_date)}

        rows = []
        for e in sorted(self._employees.list_all(), key=lambda e: e.employee_identifier):
            record = by_employee.get(e.employee_id)
            rows.append(
                DailyReportRow(
                    names=e.names,
                    employee_identifier=e.employee_identifier,
                    check_in_at=record.check_in_at if record else None,
                    check_out_at=record.check_out_at if record else None,
                    status=compute_status(record),
                )
            )
        return rows

    def to_csv(self, work_date: date) -> bytes:
        """CSV export (utf-8 with BOM so Excel picks up the encoding)."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in self.build(work_date):
            writer.writerow(
                {
                    "names": row.names,
                    "employee_identifier": row.employee_identifier,
                    "check_in": row.check_in_at.strftime("%H:%M:%S") if row.check_in_at else "-",
                    "check_out": row.check_out_at.strftime("%H:%M:%S") if row.check_out_at else "-",
                    "status": row.status.value,
                }
            )
        return out.getvalue().encode("utf-8-sig")

    @staticmethod
    def csv_filename(work_date: date) -> str:
        return f"attendance-report-{format_date(work_date)}.csv"
