from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AttendanceEventType, MailJobStatus


@dataclass(frozen=True)
class AttendanceNotification:
    """Payload gửi vào hàng đợi mail sau khi chấm công thành công."""

    email: str
    employee_name: str
    attendance_date: str
    status: AttendanceEventType
    occurred_at: str

    def to_payload(self) -> dict:
        return {
            "email": self.email,
            "employeeName": self.employee_name,
            "attendanceDate": self.attendance_date,
            "status": self.status.value,
            "occurredAt": self.occurred_at,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "AttendanceNotification":
        return cls(
            email=str(payload["email"]),
            employee_name=str(payload["employeeName"]),
            attendance_date=str(payload["attendanceDate"]),
            status=AttendanceEventType(payload["status"]),
            occurred_at=str(payload["occurredAt"]),
        )


@dataclass(frozen=True)
class PasswordResetEmail:
    email: str
    reset_url: str

    def to_payload(self) -> dict:
        return {"email": self.email, "resetUrl": self.reset_url}

    @classmethod
    def from_payload(cls, payload: dict) -> "PasswordResetEmail":
        return cls(email=str(payload["email"]), reset_url=str(payload["resetUrl"]))


@dataclass(frozen=True)
class MailJob:
    job_id: int
    job_name: str
    payload: dict[str, Any]
    status: MailJobStatus
    attempts_made: int
    max_attempts: int
    backoff_ms: int
    available_at: Optional[datetime] = None
    last_error: Optional[str] = None

    @property
    def attempts_left(self) -> int:
        return max(self.max_attempts - self.attempts_made, 0)
