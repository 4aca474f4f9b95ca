from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

TABLE = "users"
COLUMNS = (
    "user_id",
    "email",
    "password_hash",
    "role",
    "refresh_token_hash",
    "reset_token_hash",
    "reset_token_expires_at",
    "created_at",
    "updated_at",
)
_SELECT = f"SELECT {', '.join(COLUMNS)} FROM {TABLE}"


def row_to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=str(r["user_id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]) if r.get("role") else None,
        refresh_token_hash=r.get("refresh_token_hash"),
        reset_token_hash=r.get("reset_token_hash"),
        reset_token_expires_at=r.get("reset_token_expires_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {column}=%s", (value,))
            r = fetchone(cur)
            return row_to_user(r) if r else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._get_one("user_id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_reset_token_hash(self, token_hash: str) -> Optional[User]:
        return self._get_one("reset_token_hash", token_hash)

    def create(self, *, user_id: str, email: str, password_hash: str, role: Optional[Role]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {TABLE}(user_id, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                (user_id, email, password_hash, role.value if role else None),
            )

    def update_refresh_token_hash(self, user_id: str, token_hash: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE {TABLE} SET refresh_token_hash=%s WHERE user_id=%s", (token_hash, user_id))
            return cur.rowcount > 0

    def update_reset_token(self, user_id: str, token_hash: Optional[str], expires_at: Optional[datetime]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {TABLE} SET reset_token_hash=%s, reset_token_expires_at=%s WHERE user_id=%s",
                (token_hash, expires_at, user_id),
            )

    def update_password(self, user_id: str, password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE {TABLE} SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
