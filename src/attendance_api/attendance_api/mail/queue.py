from __future__ import annotations

import logging
from typing import Protocol

from ..core.constants import (
    DEFAULT_MAIL_ATTEMPTS,
    DEFAULT_MAIL_BACKOFF_MS,
    MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION,
    MAIL_JOB_SEND_RESET_PASSWORD_EMAIL,
)
from .model import AttendanceNotification, PasswordResetEmail
from .repository import MailJobRepository

logger = logging.getLogger(__name__)


class NotificationQueue(Protocol):
    def enqueue_attendance_notification(self, notification: AttendanceNotification) -> int:
        raise NotImplementedError


class PasswordResetQueue(Protocol):
    def enqueue_reset_password_email(self, *, email: str, reset_url: str) -> int:
        raise NotImplementedError


class MailQueueService(NotificationQueue, PasswordResetQueue):
    """Producer side of the mail queue; delivery happens in ``MailWorker``."""

    def __init__(
        self,
        jobs: MailJobRepository,
        *,
        attempts: int = DEFAULT_MAIL_ATTEMPTS,
        backoff_ms: int = DEFAULT_MAIL_BACKOFF_MS,
    ):
        self._jobs = jobs
        self._attempts = int(attempts)
        self._backoff_ms = int(backoff_ms)

    def enqueue_attendance_notification(self, notification: AttendanceNotification) -> int:
        job_id = self._jobs.enqueue(
            job_name=MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION,
            payload=notification.to_payload(),
            max_attempts=self._attempts,
            backoff_ms=self._backoff_ms,
        )
        logger.debug("Enqueued %s job_id=%s", MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION, job_id)
        return job_id

    def enqueue_reset_password_email(self, *, email: str, reset_url: str) -> int:
        job_id = self._jobs.enqueue(
            job_name=MAIL_JOB_SEND_RESET_PASSWORD_EMAIL,
            payload=PasswordResetEmail(email=email, reset_url=reset_url).to_payload(),
            max_attempts=self._attempts,
            backoff_ms=self._backoff_ms,
        )
        logger.debug("Enqueued %s job_id=%s", MAIL_JOB_SEND_RESET_PASSWORD_EMAIL, job_id)
        return job_id
