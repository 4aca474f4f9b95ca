from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_date, now_local, to_date_only, to_iso_utc, to_local_naive
from ..core.enums import AttendanceEventType
from ..core.exceptions import ConflictError, DomainError, DuplicateKeyViolation, NotFoundError
from ..core.result import Outcome
from ..database.transaction import Transaction, TransactionalStore
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..mail.model import AttendanceNotification
from ..mail.queue import NotificationQueue
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

EMPLOYEE_NOT_FOUND = "Employee not found"
ALREADY_CHECKED_IN = "Employee already checked in for this date"
CHECK_OUT_BEFORE_CHECK_IN = "Cannot check out before check-in for this date"
ALREADY_CHECKED_OUT = "Employee already checked out for this date"
INVALID_DATE_RANGE = "dateFrom cannot be greater than dateTo"


@dataclass(frozen=True)
class _Committed:
    record: AttendanceRecord
    employee: Employee
    event: AttendanceEventType
    occurred_at: datetime
    work_date: date


class AttendanceService:
    """Check-in / check-out state machine.

    Every mutating path runs in one transaction and locks the employee row
    first, then the (employee, date) attendance row. Notifications are
    enqueued only after commit and never affect the result.
    """

    def __init__(
        self,
        store: TransactionalStore,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        notifications: NotificationQueue,
        *,
        clock=now_local,
    ):
        self._store = store
        self._attendance = attendance
        self._employees = employees
        self._notifications = notifications
        self._clock = clock

    def check_in(self, employee_id: str, *, occurred_at: Optional[datetime] = None) -> Outcome[AttendanceRecord]:
        occurred_at = self._resolve_occurred_at(occurred_at)
        work_date = to_date_only(occurred_at)

        def work(tx: Transaction) -> _Committed:
            employee = self._lock_employee(tx, employee_id)
            if self._attendance.lock_for_employee_and_date(tx, employee_id, work_date):
                raise ConflictError(ALREADY_CHECKED_IN)

            record = self._attendance.insert_checkin(
                tx,
                attendance_id=str(uuid.uuid4()),
                employee_id=employee_id,
                work_date=work_date,
                check_in_at=occurred_at,
            )
            return _Committed(record, employee, AttendanceEventType.CHECK_IN, occurred_at, work_date)

        try:
            committed = self._store.with_transaction(work)
        except DuplicateKeyViolation:
            # Lost the race on the unique (employee_id, work_date) key.
            logger.info("Duplicate check-in rejected by unique key for employeeId=%s on %s", employee_id, work_date)
            return Outcome.conflict(ALREADY_CHECKED_IN)
        except DomainError as e:
            return Outcome.from_error(e)

        self._notify(committed)
        return Outcome.ok(committed.record)

    def check_out(self, employee_id: str, *, occurred_at: Optional[datetime] = None) -> Outcome[AttendanceRecord]:
        occurred_at = self._resolve_occurred_at(occurred_at)
        work_date = to_date_only(occurred_at)

        def work(tx: Transaction) -> _Committed:
            employee = self._lock_employee(tx, employee_id)
            existing = self._attendance.lock_for_employee_and_date(tx, employee_id, work_date)
            if existing is None:
                raise ConflictError(CHECK_OUT_BEFORE_CHECK_IN)
            if not existing.is_open:
                raise ConflictError(ALREADY_CHECKED_OUT)

            record = self._attendance.mark_checked_out(tx, existing, check_out_at=occurred_at)
            return _Committed(record, employee, AttendanceEventType.CHECK_OUT, occurred_at, work_date)

        try:
            committed = self._store.with_transaction(work)
        except DomainError as e:
            return Outcome.from_error(e)

        self._notify(committed)
        return Outcome.ok(committed.record)

    def find_all(
        self,
        *,
        employee_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Outcome[list[AttendanceRecord]]:
        if date_from is not None and date_to is not None and date_from > date_to:
            return Outcome.bad_request(INVALID_DATE_RANGE)

        rows = self._attendance.find_all(employee_id=employee_id, date_from=date_from, date_to=date_to)
        return Outcome.ok(list(rows))

    def _resolve_occurred_at(self, occurred_at: Optional[datetime]) -> datetime:
        return to_local_naive(occurred_at) if occurred_at is not None else self._clock()

    def _lock_employee(self, tx: Transaction, employee_id: str) -> Employee:
        employee = self._employees.lock_by_id(tx, employee_id)
        if employee is None:
            raise NotFoundError(EMPLOYEE_NOT_FOUND)
        return employee

    def _notify(self, committed: _Committed) -> None:
        notification = AttendanceNotification(
            email=committed.employee.email,
            employee_name=committed.employee.names,
            attendance_date=format_date(committed.work_date),
            status=committed.event,
            occurred_at=to_iso_utc(committed.occurred_at),
        )
        try:
            self._notifications.enqueue_attendance_notification(notification)
        except Exception:
            logger.exception(
                "Failed to queue attendance %s notification for employeeId=%s on %s",
                committed.event.value,
                committed.employee.employee_id,
                notification.attendance_date,
            )
            return

        logger.info(
            "Queued attendance %s notification for employeeId=%s on %s",
            committed.event.value,
            committed.employee.employee_id,
            notification.attendance_date,
        )
