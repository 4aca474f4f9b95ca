"""In-memory implementations of the repository Protocols used by the tests."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from src.attendance_api.attendance_api.attendance.model import AttendanceRecord
from src.attendance_api.attendance_api.auth.model import User
from src.attendance_api.attendance_api.core.enums import MailJobStatus
from src.attendance_api.attendance_api.core.exceptions import DuplicateKeyViolation
from src.attendance_api.attendance_api.employees.model import Employee
from src.attendance_api.attendance_api.mail.model import MailJob

CREATED_BASE = datetime(2026, 1, 1, 0, 0, 0)


class FakeTx:
    """Stand-in for ``Transaction``; the in-memory repositories ignore it."""


class InMemoryDatabase:
    """Tables plus a single lock that plays the role of the employee row lock."""

    def __init__(self):
        self.employees: dict[str, Employee] = {}
        self.attendance: dict[str, AttendanceRecord] = {}
        self.lock = threading.RLock()
        self.transactions = 0
        self.rollbacks = 0
        self._seq = 0

    def next_created_at(self) -> datetime:
        self._seq += 1
        return CREATED_BASE + timedelta(seconds=self._seq)


class InMemoryStore:
    def __init__(self, db: InMemoryDatabase, *, serialize: bool = True):
        self._db = db
        self._serialize = serialize

    def with_transaction(self, work):
        if self._serialize:
            with self._db.lock:
                return self._run(work)
        return self._run(work)

    def _run(self, work):
        self._db.transactions += 1
        try:
            return work(FakeTx())
        except Exception:
            self._db.rollbacks += 1
            raise


class InMemoryEmployees:
    def __init__(self, db: InMemoryDatabase):
        self._db = db
        self.locked: list[str] = []

    def add(self, employee: Employee) -> Employee:
        self._db.employees[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._db.employees.get(employee_id)

    def lock_by_id(self, tx, employee_id: str) -> Optional[Employee]:
        self.locked.append(employee_id)
        return self._db.employees.get(employee_id)

    def list_all(self):
        return sorted(self._db.employees.values(), key=lambda e: e.employee_identifier)

    def list_page(self, *, offset: int, limit: int):
        items = sorted(self._db.employees.values(), key=lambda e: e.created_at or CREATED_BASE, reverse=True)
        return items[offset : offset + limit]

    def count(self) -> int:
        return len(self._db.employees)

    def create(self, *, employee_id, names, email, employee_identifier, phone_number) -> None:
        for e in self._db.employees.values():
            if e.email == email or e.employee_identifier == employee_identifier:
                raise DuplicateKeyViolation("Duplicate entry")
        self._db.employees[employee_id] = Employee(
            employee_id=employee_id,
            names=names,
            email=email,
            employee_identifier=employee_identifier,
            phone_number=phone_number,
            created_at=self._db.next_created_at(),
        )

    def update(self, employee_id: str, *, fields: dict) -> bool:
        current = self._db.employees.get(employee_id)
        if not current:
            return False
        for e in self._db.employees.values():
            if e.employee_id == employee_id:
                continue
            if fields.get("email") == e.email or fields.get("employee_identifier") == e.employee_identifier:
                raise DuplicateKeyViolation("Duplicate entry")
        data = {**current.__dict__, **fields}
        self._db.employees[employee_id] = Employee(**data)
        return True

    def delete_by_id(self, employee_id: str) -> bool:
        if employee_id not in self._db.employees:
            return False
        del self._db.employees[employee_id]
        self._db.attendance = {k: v for k, v in self._db.attendance.items() if v.employee_id != employee_id}
        return True


class InMemoryAttendance:
    def __init__(self, db: InMemoryDatabase):
        self._db = db
        self._unique = threading.Lock()
        self.locked: list[tuple[str, date]] = []

    def _find(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._db.attendance.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def lock_for_employee_and_date(self, tx, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        self.locked.append((employee_id, work_date))
        return self._find(employee_id, work_date)

    def insert_checkin(self, tx, *, attendance_id, employee_id, work_date, check_in_at) -> AttendanceRecord:
        with self._unique:
            if self._find(employee_id, work_date):
                raise DuplicateKeyViolation("Duplicate entry for key 'uq_attendance_employee_date'")
            created_at = self._db.next_created_at()
            record = AttendanceRecord(
                attendance_id=attendance_id,
                employee_id=employee_id,
                work_date=work_date,
                check_in_at=check_in_at,
                check_out_at=None,
                created_at=created_at,
                updated_at=created_at,
            )
            self._db.attendance[attendance_id] = record
            return record

    def mark_checked_out(self, tx, record: AttendanceRecord, *, check_out_at: datetime) -> AttendanceRecord:
        updated = AttendanceRecord(
            attendance_id=record.attendance_id,
            employee_id=record.employee_id,
            work_date=record.work_date,
            check_in_at=record.check_in_at,
            check_out_at=check_out_at,
            created_at=record.created_at,
            updated_at=self._db.next_created_at(),
        )
        self._db.attendance[record.attendance_id] = updated
        return updated

    def find_all(self, *, employee_id=None, date_from=None, date_to=None):
        self.last_query = {"employee_id": employee_id, "date_from": date_from, "date_to": date_to}
        rows = [
            r
            for r in self._db.attendance.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (date_from is None or r.work_date >= date_from)
            and (date_to is None or r.work_date <= date_to)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.created_at), reverse=True)

    def list_for_date(self, work_date: date):
        return self.find_all(date_from=work_date, date_to=work_date)

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._db.attendance[record.attendance_id] = record
        return record


class RecordingQueue:
    def __init__(self):
        self.sent = []

    def enqueue_attendance_notification(self, notification) -> int:
        self.sent.append(notification)
        return len(self.sent)


class FailingQueue:
    def __init__(self):
        self.calls = 0

    def enqueue_attendance_notification(self, notification) -> int:
        self.calls += 1
        raise ConnectionError("mail queue unavailable")


class InMemoryMailJobs:
    def __init__(self):
        self.jobs: dict[int, dict] = {}
        self._next_id = 1

    def enqueue(self, *, job_name, payload, max_attempts, backoff_ms) -> int:
        job_id = self._next_id
        self._next_id += 1
        self.jobs[job_id] = {
            "job_name": job_name,
            "payload": payload,
            "status": "pending",
            "attempts_made": 0,
            "max_attempts": max_attempts,
            "backoff_ms": backoff_ms,
            "available_at": datetime.min,
            "last_error": None,
        }
        return job_id

    def claim_next(self, *, now):
        due = [
            (j["available_at"], job_id)
            for job_id, j in self.jobs.items()
            if j["status"] == "pending" and j["available_at"] <= now
        ]
        if not due:
            return None
        _, job_id = min(due)
        j = self.jobs[job_id]
        j["status"] = "processing"
        j["attempts_made"] += 1
        return MailJob(
            job_id=job_id,
            job_name=j["job_name"],
            payload=j["payload"],
            status=MailJobStatus.PROCESSING,
            attempts_made=j["attempts_made"],
            max_attempts=j["max_attempts"],
            backoff_ms=j["backoff_ms"],
            available_at=j["available_at"],
            last_error=j["last_error"],
        )

    def mark_completed(self, job_id) -> None:
        self.jobs[job_id]["status"] = "completed"

    def reschedule(self, job_id, *, available_at, error) -> None:
        self.jobs[job_id].update(status="pending", available_at=available_at, last_error=error)

    def mark_failed(self, job_id, *, error) -> None:
        self.jobs[job_id].update(status="failed", last_error=error)

    def count_pending(self) -> int:
        return sum(1 for j in self.jobs.values() if j["status"] == "pending")

    def prune_finished(self, *, keep: int) -> int:
        return 0

    def release_stale(self, *, claimed_before) -> int:
        return 0


class InMemoryUsers:
    def __init__(self):
        self.users: dict[str, User] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_reset_token_hash(self, token_hash: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.reset_token_hash == token_hash), None)

    def create(self, *, user_id, email, password_hash, role) -> None:
        if self.get_by_email(email):
            raise DuplicateKeyViolation("Duplicate entry")
        self.users[user_id] = User(
            user_id=user_id,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=CREATED_BASE,
            updated_at=CREATED_BASE,
        )

    def update_refresh_token_hash(self, user_id, token_hash) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], refresh_token_hash=token_hash)
        return True

    def update_reset_token(self, user_id, token_hash, expires_at) -> None:
        self.users[user_id] = replace(
            self.users[user_id], reset_token_hash=token_hash, reset_token_expires_at=expires_at
        )

    def update_password(self, user_id, password_hash) -> None:
        self.users[user_id] = replace(self.users[user_id], password_hash=password_hash)


class RecordingCursor:
    """DB-API cursor double that records ``execute`` calls."""

    def __init__(self, rows=None):
        self.executed: list[tuple[str, tuple]] = []
        self.rows = list(rows or [])
        self.rowcount = 1

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        rows, self.rows = self.rows, []
        return rows

    def close(self):
        pass


class RecordingConnection:
    def __init__(self, cursor: RecordingCursor):
        self._cursor = cursor
        self.events: list = []

    def start_transaction(self, isolation_level=None):
        self.events.append(("start", isolation_level))

    def cursor(self, dictionary=True, buffered=False):
        return self._cursor

    def commit(self):
        self.events.append("commit")

    def rollback(self):
        self.events.append("rollback")

    def close(self):
        self.events.append("close")


class RecordingConnectionFactory:
    def __init__(self, conn: RecordingConnection):
        self.conn = conn

    def connect(self):
        return self.conn
