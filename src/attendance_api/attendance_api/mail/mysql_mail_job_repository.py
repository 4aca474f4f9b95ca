from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from ..core.enums import MailJobStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import MailJob
from .repository import MailJobRepository


class MySQLMailJobRepository(MailJobRepository):
    """``mail_jobs`` table used as a durable at-least-once queue."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def enqueue(self, *, job_name: str, payload: dict, max_attempts: int, backoff_ms: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO mail_jobs(job_name, payload, status, max_attempts, backoff_ms)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (job_name, json.dumps(payload), MailJobStatus.PENDING.value, int(max_attempts), int(backoff_ms)),
            )
            return int(cur.lastrowid)

    def claim_next(self, *, now: datetime) -> Optional[MailJob]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT job_id, job_name, payload, status, attempts_made, max_attempts, backoff_ms,
                       available_at, last_error
                FROM mail_jobs
                WHERE status=%s AND available_at <= %s
                ORDER BY available_at ASC, job_id ASC
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (MailJobStatus.PENDING.value, now),
            )
            r = fetchone(cur)
            if not r:
                return None

            attempts_made = int(r["attempts_made"]) + 1
            cur.execute(
                "UPDATE mail_jobs SET status=%s, attempts_made=%s WHERE job_id=%s",
                (MailJobStatus.PROCESSING.value, attempts_made, r["job_id"]),
            )
            return MailJob(
                job_id=int(r["job_id"]),
                job_name=r["job_name"],
                payload=json.loads(r["payload"]),
                status=MailJobStatus.PROCESSING,
                attempts_made=attempts_made,
                max_attempts=int(r["max_attempts"]),
                backoff_ms=int(r["backoff_ms"]),
                available_at=r.get("available_at"),
                last_error=r.get("last_error"),
            )

    def _set_status(self, job_id: int, status: MailJobStatus, *, error: Optional[str] = None,
                    available_at: Optional[datetime] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if available_at is None:
                cur.execute(
                    "UPDATE mail_jobs SET status=%s, last_error=%s WHERE job_id=%s",
                    (status.value, error, int(job_id)),
                )
            else:
                cur.execute(
                    "UPDATE mail_jobs SET status=%s, last_error=%s, available_at=%s WHERE job_id=%s",
                    (status.value, error, available_at, int(job_id)),
                )

    def mark_completed(self, job_id: int) -> None:
        self._set_status(job_id, MailJobStatus.COMPLETED)

    def reschedule(self, job_id: int, *, available_at: datetime, error: str) -> None:
        self._set_status(job_id, MailJobStatus.PENDING, error=error, available_at=available_at)

    def mark_failed(self, job_id: int, *, error: str) -> None:
        self._set_status(job_id, MailJobStatus.FAILED, error=error)

    def count_pending(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM mail_jobs WHERE status=%s", (MailJobStatus.PENDING.value,))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def prune_finished(self, *, keep: int) -> int:
        removed = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for status in (MailJobStatus.COMPLETED, MailJobStatus.FAILED):
                # MySQL does not allow LIMIT inside IN (subquery); wrap it in a derived table.
                cur.execute(
                    """
                    DELETE FROM mail_jobs
                    WHERE status=%s AND job_id NOT IN (
                        SELECT job_id FROM (
                            SELECT job_id FROM mail_jobs WHERE status=%s ORDER BY job_id DESC LIMIT %s
                        ) AS newest
                    )
                    """,
                    (status.value, status.value, int(keep)),
                )
                removed += int(cur.rowcount)
        return removed

    def release_stale(self, *, claimed_before: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE mail_jobs SET status=%s WHERE status=%s AND updated_at < %s",
                (MailJobStatus.PENDING.value, MailJobStatus.PROCESSING.value, claimed_before),
            )
            return int(cur.rowcount)
