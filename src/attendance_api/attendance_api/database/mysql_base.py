from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateKeyViolation
from .connection import DatabaseConnection


def is_duplicate_key_error(error: BaseException) -> bool:
    return isinstance(error, mysql.connector.IntegrityError) and error.errno == errorcode.ER_DUP_ENTRY


def translate_integrity_error(error: BaseException) -> BaseException:
    """Map MySQL duplicate-key errors to ``DuplicateKeyViolation``; others unchanged."""
    if is_duplicate_key_error(error):
        return DuplicateKeyViolation(str(error))
    return error


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        translated = translate_integrity_error(e)
        if translated is e:
            raise
        raise translated from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def where_clause(where: Dict[str, Any]) -> tuple[str, list[Any]]:
    """Build ``a=%s AND b=%s`` from a column->value mapping (columns are code constants)."""
    if not where:
        raise ValueError("where must not be empty")
    return " AND ".join(f"{col}=%s" for col in where), list(where.values())
