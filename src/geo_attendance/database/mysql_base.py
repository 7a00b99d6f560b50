from __future__ import annotations

from contextlib import contextmanager, suppress
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errors

from ..core.exceptions import StorageUnavailable
from .connection import DatabaseConnection

# Connectivity failures; constraint violations and SQL errors are not in this list.
UNAVAILABLE_ERRORS = (errors.InterfaceError, errors.OperationalError, errors.PoolError)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except UNAVAILABLE_ERRORS as e:
        raise StorageUnavailable(f"Database unavailable: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except UNAVAILABLE_ERRORS as e:
        with suppress(mysql.connector.Error):
            conn.rollback()
        raise StorageUnavailable(f"Database unavailable: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        with suppress(mysql.connector.Error):
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
