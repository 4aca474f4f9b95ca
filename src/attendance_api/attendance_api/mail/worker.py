from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import (
    DEFAULT_MAIL_KEEP_FINISHED,
    MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION,
    MAIL_JOB_SEND_RESET_PASSWORD_EMAIL,
)
from .delivery import MailDeliveryService
from .model import AttendanceNotification, MailJob, PasswordResetEmail
from .repository import MailJobRepository

logger = logging.getLogger(__name__)


class UnknownJobError(Exception):
    pass


def backoff_delay(job: MailJob) -> timedelta:
    """Exponential backoff: backoff_ms, 2*backoff_ms, 4*backoff_ms, ..."""
    attempt = max(job.attempts_made, 1)
    return timedelta(milliseconds=job.backoff_ms * (2 ** (attempt - 1)))


class MailWorker:
    """Consumer side of the mail queue.

    Jobs are claimed one at a time; a failed delivery is retried with
    exponential backoff until ``max_attempts`` is reached.
    """

    def __init__(
        self,
        jobs: MailJobRepository,
        delivery: MailDeliveryService,
        *,
        clock: Callable[[], datetime] = now_local,
        keep_finished: int = DEFAULT_MAIL_KEEP_FINISHED,
        stale_after: timedelta = timedelta(minutes=10),
    ):
        self._jobs = jobs
        self._delivery = delivery
        self._clock = clock
        self._keep_finished = int(keep_finished)
        self._stale_after = stale_after
        self._handlers: dict[str, Callable[[dict], object]] = {
            MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION: self._handle_attendance_notification,
            MAIL_JOB_SEND_RESET_PASSWORD_EMAIL: self._handle_reset_password_email,
        }

    def _handle_attendance_notification(self, payload: dict) -> None:
        self._delivery.send_attendance_notification(AttendanceNotification.from_payload(payload))

    def _handle_reset_password_email(self, payload: dict) -> None:
        self._delivery.send_reset_password_email(PasswordResetEmail.from_payload(payload))

    def run_once(self) -> Optional[MailJob]:
        job = self._jobs.claim_next(now=self._clock())
        if job is None:
            return None

        try:
            handler = self._handlers.get(job.job_name)
            if handler is None:
                raise UnknownJobError(f"No handler for job {job.job_name!r}")
            handler(job.payload)
        except UnknownJobError as e:
            logger.error("Mail job %s failed permanently: %s", job.job_id, e)
            self._jobs.mark_failed(job.job_id, error=str(e))
        except Exception as e:
            if job.attempts_left > 0:
                available_at = self._clock() + backoff_delay(job)
                logger.warning(
                    "Mail job %s attempt %s/%s failed, retry at %s: %s",
                    job.job_id, job.attempts_made, job.max_attempts, available_at.isoformat(), e,
                )
                self._jobs.reschedule(job.job_id, available_at=available_at, error=str(e))
            else:
                logger.error("Mail job %s failed after %s attempts: %s", job.job_id, job.attempts_made, e)
                self._jobs.mark_failed(job.job_id, error=str(e))
        else:
            self._jobs.mark_completed(job.job_id)
        return job

    def drain(self, *, limit: int = 100) -> int:
        processed = 0
        while processed < limit and self.run_once() is not None:
            processed += 1
        return processed

    def run_forever(self, *, poll_interval: float = 1.0, stop_event: Optional[threading.Event] = None) -> None:
        stop_event = stop_event or threading.Event()
        released = self._jobs.release_stale(claimed_before=self._clock() - self._stale_after)
        if released:
            logger.warning("Released %s stale mail jobs back to pending", released)
        logger.info("Mail worker started (poll_interval=%ss)", poll_interval)
        while not stop_event.is_set():
            processed = self.drain()
            if processed:
                self._jobs.prune_finished(keep=self._keep_finished)
            else:
                stop_event.wait(poll_interval)
        logger.info("Mail worker stopped")
