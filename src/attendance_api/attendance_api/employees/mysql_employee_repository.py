from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..database.transaction import Transaction
from .model import Employee
from .repository import EmployeeRepository

TABLE = "employees"
COLUMNS = (
    "employee_id",
    "names",
    "email",
    "employee_identifier",
    "phone_number",
    "created_at",
    "updated_at",
)
_SELECT = f"SELECT {', '.join(COLUMNS)} FROM {TABLE}"
UPDATABLE_COLUMNS = ("names", "email", "employee_identifier", "phone_number")


def row_to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        names=r["names"],
        email=r["email"],
        employee_identifier=r["employee_identifier"],
        phone_number=r["phone_number"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def lock_by_id(self, tx: Transaction, employee_id: str) -> Optional[Employee]:
        r = tx.lock_and_find(TABLE, {"employee_id": employee_id}, COLUMNS)
        return row_to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY employee_identifier ASC")
            return [row_to_employee(r) for r in fetchall(cur)]

    def list_page(self, *, offset: int, limit: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} ORDER BY created_at DESC LIMIT %s OFFSET %s",
                (int(limit), int(offset)),
            )
            return [row_to_employee(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM {TABLE}")
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def create(
        self,
        *,
        employee_id: str,
        names: str,
        email: str,
        employee_identifier: str,
        phone_number: str,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {TABLE}(employee_id, names, email, employee_identifier, phone_number)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (employee_id, names, email, employee_identifier, phone_number),
            )

    def update(self, employee_id: str, *, fields: dict) -> bool:
        columns = {k: v for k, v in fields.items() if k in UPDATABLE_COLUMNS}
        if not columns:
            return False
        assignments = ", ".join(f"{col}=%s" for col in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {TABLE} SET {assignments} WHERE employee_id=%s",
                tuple(columns.values()) + (employee_id,),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {TABLE} WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0
