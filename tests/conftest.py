from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_api.attendance_api.attendance.service import AttendanceService
from src.attendance_api.attendance_api.employees.model import Employee
from tests.fakes import InMemoryAttendance, InMemoryDatabase, InMemoryEmployees, InMemoryStore, RecordingQueue

EMPLOYEE_ID = "2f56f85a-f8e4-4c03-82a2-b723bcf6e1f4"
OTHER_EMPLOYEE_ID = "7c1d0e4b-9a43-4f0e-8d8e-3a3f6b1f2c55"
MISSING_EMPLOYEE_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture()
def fixed_now() -> datetime:
    return datetime(2026, 2, 7, 9, 0, 0)


@pytest.fixture()
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture()
def employees(db) -> InMemoryEmployees:
    repo = InMemoryEmployees(db)
    repo.add(
        Employee(
            employee_id=EMPLOYEE_ID,
            names="John Doe",
            email="john.doe@company.com",
            employee_identifier="EMP001",
            phone_number="+250788123456",
        )
    )
    repo.add(
        Employee(
            employee_id=OTHER_EMPLOYEE_ID,
            names="Jane Smith",
            email="jane.smith@company.com",
            employee_identifier="EMP002",
            phone_number="+250788654321",
        )
    )
    return repo


@pytest.fixture()
def attendance(db) -> InMemoryAttendance:
    return InMemoryAttendance(db)


@pytest.fixture()
def queue() -> RecordingQueue:
    return RecordingQueue()


@pytest.fixture()
def service(db, attendance, employees, queue, fixed_now) -> AttendanceService:
    return AttendanceService(InMemoryStore(db), attendance, employees, queue, clock=lambda: fixed_now)
