from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attendance_api.attendance_api.attendance.model import AttendanceRecord
from src.attendance_api.attendance_api.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.attendance_api.attendance_api.database.transaction import MySQLTransaction
from tests.conftest import EMPLOYEE_ID
from tests.fakes import RecordingConnection, RecordingConnectionFactory, RecordingCursor

COLS = "attendance_id, employee_id, work_date, check_in_at, check_out_at, created_at, updated_at"
DAY = date(2026, 2, 7)
CHECK_IN_AT = datetime(2026, 2, 7, 9, 0, 0, 123456)
CHECK_OUT_AT = datetime(2026, 2, 7, 17, 0, 0, 654321)


def _row(**overrides):
    row = {
        "attendance_id": "a1",
        "employee_id": EMPLOYEE_ID,
        "work_date": DAY,
        "check_in_at": CHECK_IN_AT,
        "check_out_at": None,
        "created_at": CHECK_IN_AT,
        "updated_at": CHECK_IN_AT,
    }
    row.update(overrides)
    return row


def _repo(cur: RecordingCursor) -> MySQLAttendanceRepository:
    return MySQLAttendanceRepository(RecordingConnectionFactory(RecordingConnection(cur)))


def test_lock_for_employee_and_date_locks_the_unique_key_row():
    cur = RecordingCursor(rows=[_row()])

    rec = _repo(cur).lock_for_employee_and_date(MySQLTransaction(cur), EMPLOYEE_ID, DAY)

    assert cur.executed == [
        (f"SELECT {COLS} FROM attendances WHERE employee_id=%s AND work_date=%s FOR UPDATE", (EMPLOYEE_ID, DAY))
    ]
    assert rec.attendance_id == "a1"
    assert rec.is_open


def test_lock_for_employee_and_date_without_row():
    cur = RecordingCursor()

    assert _repo(cur).lock_for_employee_and_date(MySQLTransaction(cur), EMPLOYEE_ID, DAY) is None


def test_insert_checkin_writes_open_row_and_reloads_it():
    cur = RecordingCursor(rows=[_row()])

    rec = _repo(cur).insert_checkin(
        MySQLTransaction(cur),
        attendance_id="a1",
        employee_id=EMPLOYEE_ID,
        work_date=DAY,
        check_in_at=CHECK_IN_AT,
    )

    assert cur.executed == [
        (
            "INSERT INTO attendances(attendance_id, employee_id, work_date, check_in_at, check_out_at) "
            "VALUES(%s, %s, %s, %s, %s)",
            ("a1", EMPLOYEE_ID, DAY, CHECK_IN_AT, None),
        ),
        (f"SELECT {COLS} FROM attendances WHERE attendance_id=%s", ("a1",)),
    ]
    assert rec.check_in_at == CHECK_IN_AT


def test_mark_checked_out_updates_by_id():
    cur = RecordingCursor(rows=[_row(check_out_at=CHECK_OUT_AT)])
    record = AttendanceRecord("a1", EMPLOYEE_ID, DAY, CHECK_IN_AT)

    rec = _repo(cur).mark_checked_out(MySQLTransaction(cur), record, check_out_at=CHECK_OUT_AT)

    assert cur.executed[0] == ("UPDATE attendances SET check_out_at=%s WHERE attendance_id=%s", (CHECK_OUT_AT, "a1"))
    assert not rec.is_open
    assert rec.check_out_at == CHECK_OUT_AT


ORDER = "ORDER BY work_date DESC, created_at DESC"


@pytest.mark.parametrize(
    "filters, where, params",
    [
        ({}, "", ()),
        ({"employee_id": EMPLOYEE_ID}, "WHERE employee_id=%s ", (EMPLOYEE_ID,)),
        ({"date_from": date(2026, 2, 1)}, "WHERE work_date >= %s ", (date(2026, 2, 1),)),
        ({"date_to": date(2026, 2, 28)}, "WHERE work_date <= %s ", (date(2026, 2, 28),)),
        (
            {"employee_id": EMPLOYEE_ID, "date_from": date(2026, 2, 1), "date_to": date(2026, 2, 28)},
            "WHERE employee_id=%s AND work_date >= %s AND work_date <= %s ",
            (EMPLOYEE_ID, date(2026, 2, 1), date(2026, 2, 28)),
        ),
    ],
)
def test_find_all_sql(filters, where, params):
    cur = RecordingCursor()

    _repo(cur).find_all(**filters)

    assert cur.executed == [(f"SELECT {COLS} FROM attendances {where}{ORDER}", params)]


def test_find_all_keeps_database_order():
    cur = RecordingCursor(rows=[_row(attendance_id="a2", work_date=date(2026, 2, 8)), _row()])

    rows = _repo(cur).find_all()

    assert [r.attendance_id for r in rows] == ["a2", "a1"]


def test_list_for_date_uses_inclusive_bounds_on_one_day():
    cur = RecordingCursor()

    _repo(cur).list_for_date(DAY)

    assert cur.executed == [(f"SELECT {COLS} FROM attendances WHERE work_date >= %s AND work_date <= %s {ORDER}", (DAY, DAY))]
