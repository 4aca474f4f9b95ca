from __future__ import annotations

from enum import Enum


class AttendanceEventType(str, Enum):
    """Loại sự kiện chấm công gửi kèm thông báo."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class OutcomeKind(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"


class MailJobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class MailTransport(str, Enum):
    CONSOLE = "console"
    SMTP = "smtp"


class DailyStatus(str, Enum):
    """Trạng thái trong báo cáo chấm công theo ngày."""

    ABSENT = "Absent"
    PRESENT = "Present"
    LEFT = "Left"


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"
