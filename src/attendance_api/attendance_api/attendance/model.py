from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_date


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công.

    One record per (employee_id, work_date); ``check_out_at`` is set at most once.
    """

    attendance_id: str
    employee_id: str
    work_date: date
    check_in_at: datetime
    check_out_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_at is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "date": format_date(self.work_date),
            "checkInAt": self.check_in_at.isoformat(),
            "checkOutAt": self.check_out_at.isoformat() if self.check_out_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
