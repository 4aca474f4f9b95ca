from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..database.transaction import Transaction
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def lock_for_employee_and_date(
        self, tx: Transaction, employee_id: str, work_date: date
    ) -> Optional[AttendanceRecord]:
        """Read the (employee, date) row with an exclusive lock held until ``tx`` ends."""

        raise NotImplementedError

    def insert_checkin(
        self,
        tx: Transaction,
        *,
        attendance_id: str,
        employee_id: str,
        work_date: date,
        check_in_at: datetime,
    ) -> AttendanceRecord:
        """May raise ``DuplicateKeyViolation`` when the (employee, date) row already exists."""

        raise NotImplementedError

    def mark_checked_out(
        self, tx: Transaction, record: AttendanceRecord, *, check_out_at: datetime
    ) -> AttendanceRecord:
        raise NotImplementedError

    def find_all(
        self,
        *,
        employee_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Ordered by work_date DESC, created_at DESC."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
