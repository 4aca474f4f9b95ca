from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import MailJob


class MailJobRepository(Protocol):
    def enqueue(self, *, job_name: str, payload: dict, max_attempts: int, backoff_ms: int) -> int:
        raise NotImplementedError

    def claim_next(self, *, now: datetime) -> Optional[MailJob]:
        """Atomically move the oldest due pending job to processing and count the attempt."""

        raise NotImplementedError

    def mark_completed(self, job_id: int) -> None:
        raise NotImplementedError

    def reschedule(self, job_id: int, *, available_at: datetime, error: str) -> None:
        raise NotImplementedError

    def mark_failed(self, job_id: int, *, error: str) -> None:
        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError

    def prune_finished(self, *, keep: int) -> int:
        raise NotImplementedError

    def release_stale(self, *, claimed_before: datetime) -> int:
        """Return jobs stuck in processing (e.g. worker crash) to pending."""

        raise NotImplementedError
