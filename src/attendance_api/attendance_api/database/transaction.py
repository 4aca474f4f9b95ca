"""Transactional store with explicit pessimistic row locking.

Every mutating attendance path runs inside ``with_transaction`` and acquires
its locks through ``Transaction.lock_and_find`` (``SELECT ... FOR UPDATE``).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, TypeVar

import mysql.connector

from .connection import DatabaseConnection
from .mysql_base import fetchone, translate_integrity_error, where_clause

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Transaction(Protocol):
    def lock_and_find(self, table: str, where: Dict[str, Any], columns: Sequence[str]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def find_one(self, table: str, where: Dict[str, Any], columns: Sequence[str]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def insert(self, table: str, values: Dict[str, Any]) -> None:
        raise NotImplementedError

    def update(self, table: str, values: Dict[str, Any], where: Dict[str, Any]) -> int:
        raise NotImplementedError


class TransactionalStore(Protocol):
    def with_transaction(self, work: Callable[[Transaction], T]) -> T:
        raise NotImplementedError


class MySQLTransaction(Transaction):
    def __init__(self, cur):
        self._cur = cur

    def _select(self, table: str, where: Dict[str, Any], columns: Sequence[str], *, for_update: bool):
        clause, params = where_clause(where)
        sql = f"SELECT {', '.join(columns)} FROM {table} WHERE {clause}"
        if for_update:
            sql += " FOR UPDATE"
        self._cur.execute(sql, tuple(params))
        row = fetchone(self._cur)
        return row

    def lock_and_find(self, table: str, where: Dict[str, Any], columns: Sequence[str]) -> Optional[Dict[str, Any]]:
        return self._select(table, where, columns, for_update=True)

    def find_one(self, table: str, where: Dict[str, Any], columns: Sequence[str]) -> Optional[Dict[str, Any]]:
        return self._select(table, where, columns, for_update=False)

    def insert(self, table: str, values: Dict[str, Any]) -> None:
        cols = ", ".join(values)
        placeholders = ", ".join(["%s"] * len(values))
        self._cur.execute(f"INSERT INTO {table}({cols}) VALUES({placeholders})", tuple(values.values()))

    def update(self, table: str, values: Dict[str, Any], where: Dict[str, Any]) -> int:
        assignments = ", ".join(f"{col}=%s" for col in values)
        clause, params = where_clause(where)
        self._cur.execute(
            f"UPDATE {table} SET {assignments} WHERE {clause}",
            tuple(values.values()) + tuple(params),
        )
        return int(self._cur.rowcount)


class MySQLTransactionalStore(TransactionalStore):
    def __init__(self, conn_factory: DatabaseConnection, *, isolation_level: Optional[str] = None):
        self._conn_factory = conn_factory
        self._isolation_level = isolation_level

    def with_transaction(self, work: Callable[[Transaction], T]) -> T:
        conn = self._conn_factory.connect()
        try:
            conn.start_transaction(isolation_level=self._isolation_level)
            cur = conn.cursor(dictionary=True, buffered=True)
            try:
                result = work(MySQLTransaction(cur))
                conn.commit()
                return result
            finally:
                cur.close()
        except mysql.connector.IntegrityError as e:
            conn.rollback()
            translated = translate_integrity_error(e)
            if translated is e:
                raise
            logger.debug("Duplicate key inside transaction: %s", e)
            raise translated from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
