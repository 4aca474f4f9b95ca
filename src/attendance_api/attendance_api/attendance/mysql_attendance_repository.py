from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..database.transaction import Transaction
from .model import AttendanceRecord
from .repository import AttendanceRepository

TABLE = "attendances"
COLUMNS = (
    "attendance_id",
    "employee_id",
    "work_date",
    "check_in_at",
    "check_out_at",
    "created_at",
    "updated_at",
)


def row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["attendance_id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        check_in_at=r["check_in_at"],
        check_out_at=r.get("check_out_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def lock_for_employee_and_date(
        self, tx: Transaction, employee_id: str, work_date: date
    ) -> Optional[AttendanceRecord]:
        r = tx.lock_and_find(TABLE, {"employee_id": employee_id, "work_date": work_date}, COLUMNS)
        return row_to_record(r) if r else None

    def _reload(self, tx: Transaction, attendance_id: str) -> AttendanceRecord:
        r = tx.find_one(TABLE, {"attendance_id": attendance_id}, COLUMNS)
        if not r:
            raise LookupError(f"attendance {attendance_id} vanished inside its own transaction")
        return row_to_record(r)

    def insert_checkin(
        self,
        tx: Transaction,
        *,
        attendance_id: str,
        employee_id: str,
        work_date: date,
        check_in_at: datetime,
    ) -> AttendanceRecord:
        tx.insert(
            TABLE,
            {
                "attendance_id": attendance_id,
                "employee_id": employee_id,
                "work_date": work_date,
                "check_in_at": check_in_at,
                "check_out_at": None,
            },
        )
        return self._reload(tx, attendance_id)

    def mark_checked_out(
        self, tx: Transaction, record: AttendanceRecord, *, check_out_at: datetime
    ) -> AttendanceRecord:
        tx.update(TABLE, {"check_out_at": check_out_at}, {"attendance_id": record.attendance_id})
        return self._reload(tx, record.attendance_id)

    def find_all(
        self,
        *,
        employee_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if date_from is not None:
            clauses.append("work_date >= %s")
            params.append(date_from)
        if date_to is not None:
            clauses.append("work_date <= %s")
            params.append(date_to)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {', '.join(COLUMNS)}
                FROM {TABLE}
                {where}
                ORDER BY work_date DESC, created_at DESC
                """,
                tuple(params),
            )
            return [row_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self.find_all(date_from=work_date, date_to=work_date)
