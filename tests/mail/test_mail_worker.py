from __future__ import annotations

from datetime import datetime, timedelta

from src.attendance_api.attendance_api.core.constants import MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION
from src.attendance_api.attendance_api.core.enums import AttendanceEventType
from src.attendance_api.attendance_api.mail.model import AttendanceNotification, PasswordResetEmail
from src.attendance_api.attendance_api.mail.queue import MailQueueService
from src.attendance_api.attendance_api.mail.worker import MailWorker
from tests.fakes import InMemoryMailJobs

NOW = datetime(2026, 2, 7, 9, 0, 0)

NOTIFICATION = AttendanceNotification(
    email="employee@test.com",
    employee_name="John Doe",
    attendance_date="2026-02-07",
    status=AttendanceEventType.CHECK_OUT,
    occurred_at="2026-02-07T17:00:00.000Z",
)


class RecordingDelivery:
    def __init__(self, failures: int = 0):
        self.failures = failures
        self.sent = []

    def send_attendance_notification(self, notification):
        if self.failures > 0:
            self.failures -= 1
            raise OSError("smtp down")
        self.sent.append(notification)

    def send_reset_password_email(self, email):
        self.sent.append(email)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_queue_stores_attendance_job_with_retry_policy():
    jobs = InMemoryMailJobs()

    job_id = MailQueueService(jobs).enqueue_attendance_notification(NOTIFICATION)

    job = jobs.jobs[job_id]
    assert job["job_name"] == MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION
    assert job["payload"] == {
        "email": "employee@test.com",
        "employeeName": "John Doe",
        "attendanceDate": "2026-02-07",
        "status": "check-out",
        "occurredAt": "2026-02-07T17:00:00.000Z",
    }
    assert job["max_attempts"] == 3
    assert job["backoff_ms"] == 1000


def test_worker_delivers_and_completes():
    jobs = InMemoryMailJobs()
    MailQueueService(jobs).enqueue_attendance_notification(NOTIFICATION)
    delivery = RecordingDelivery()

    processed = MailWorker(jobs, delivery, clock=Clock(NOW)).drain()

    assert processed == 1
    assert delivery.sent == [NOTIFICATION]
    assert jobs.jobs[1]["status"] == "completed"


def test_worker_retries_with_exponential_backoff_then_succeeds():
    jobs = InMemoryMailJobs()
    MailQueueService(jobs).enqueue_attendance_notification(NOTIFICATION)
    delivery = RecordingDelivery(failures=2)
    clock = Clock(NOW)
    worker = MailWorker(jobs, delivery, clock=clock)

    worker.run_once()
    assert jobs.jobs[1]["status"] == "pending"
    assert jobs.jobs[1]["available_at"] == NOW + timedelta(milliseconds=1000)
    assert worker.run_once() is None

    clock.now = NOW + timedelta(seconds=1)
    worker.run_once()
    assert jobs.jobs[1]["available_at"] == clock.now + timedelta(milliseconds=2000)

    clock.now += timedelta(seconds=2)
    worker.run_once()
    assert jobs.jobs[1]["status"] == "completed"
    assert jobs.jobs[1]["attempts_made"] == 3
    assert delivery.sent == [NOTIFICATION]


def test_worker_marks_failed_after_max_attempts():
    jobs = InMemoryMailJobs()
    MailQueueService(jobs, attempts=2, backoff_ms=10).enqueue_attendance_notification(NOTIFICATION)
    clock = Clock(NOW)
    worker = MailWorker(jobs, RecordingDelivery(failures=5), clock=clock)

    worker.run_once()
    clock.now += timedelta(seconds=1)
    worker.run_once()

    assert jobs.jobs[1]["status"] == "failed"
    assert jobs.jobs[1]["last_error"] == "smtp down"


def test_worker_fails_unknown_jobs_without_retry():
    jobs = InMemoryMailJobs()
    jobs.enqueue(job_name="sendSomethingElse", payload={}, max_attempts=3, backoff_ms=1000)

    MailWorker(jobs, RecordingDelivery(), clock=Clock(NOW)).run_once()

    assert jobs.jobs[1]["status"] == "failed"
    assert jobs.jobs[1]["attempts_made"] == 1


def test_worker_routes_reset_password_jobs():
    jobs = InMemoryMailJobs()
    MailQueueService(jobs).enqueue_reset_password_email(email="admin@company.com", reset_url="http://app.test/reset?token=abc")
    delivery = RecordingDelivery()

    MailWorker(jobs, delivery, clock=Clock(NOW)).drain()

    assert jobs.jobs[1]["job_name"] == "sendResetPasswordEmail"
    assert jobs.jobs[1]["payload"] == {"email": "admin@company.com", "resetUrl": "http://app.test/reset?token=abc"}
    assert delivery.sent == [PasswordResetEmail(email="admin@company.com", reset_url="http://app.test/reset?token=abc")]
    assert jobs.jobs[1]["status"] == "completed"
