from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..mail.repository import MailJobRepository


@dataclass(frozen=True)
class DependencyHealth:
    status: str
    latency_ms: int
    message: Optional[str] = None
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        out = {"status": self.status, "latencyMs": self.latency_ms}
        if self.message is not None:
            out["message"] = self.message
        out.update(self.details)
        return out


@dataclass(frozen=True)
class HealthCheckResult:
    status: str
    checks: dict[str, DependencyHealth]

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict:
        return {"status": self.status, "checks": {k: v.to_dict() for k, v in self.checks.items()}}


def _check_dependency(fn: Callable[[], dict]) -> DependencyHealth:
    start = time.monotonic()
    try:
        details = fn() or {}
    except Exception as e:
        return DependencyHealth("down", int((time.monotonic() - start) * 1000), message=str(e))
    return DependencyHealth("up", int((time.monotonic() - start) * 1000), details=details)


class HealthService:
    def __init__(self, conn_factory: DatabaseConnection, mail_jobs: MailJobRepository):
        self._conn_factory = conn_factory
        self._mail_jobs = mail_jobs

    def _ping_database(self) -> dict:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT 1")
            cur.fetchall()
        return {}

    def _inspect_mail_queue(self) -> dict:
        return {"pending": self._mail_jobs.count_pending()}

    def check(self) -> HealthCheckResult:
        checks = {
            "database": _check_dependency(self._ping_database),
            "mailQueue": _check_dependency(self._inspect_mail_queue),
        }
        status = "ok" if all(c.status == "up" for c in checks.values()) else "error"
        return HealthCheckResult(status=status, checks=checks)
