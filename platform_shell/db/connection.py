"""
Database connection utilities.

Centralizes the bounded ConnectionPool, the ContactStore read handle built on
top of it, and the lazily-built process default that FastAPI routes receive
through dependency injection (tests override get_default_store).
"""

import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from platform_shell.config import (
    DB_CONNECT_TIMEOUT,
    DB_IDLE_TIMEOUT,
    DB_POOL_MAX,
    database_path,
)

logger = logging.getLogger("shell.db")


class PoolTimeoutError(TimeoutError):
    """Raised when no pooled connection frees up within the connect timeout."""
    pass


class ConnectionPool:
    """Thread-safe pool holding at most max_size SQLite connections.

    Connections are opened read-only, so the pool never creates the database
    file or changes its journal mode. Connections idle longer than
    idle_timeout are closed the next time the pool is touched. Connections that
    raised a database error are discarded instead of being returned to the pool.
    """

    def __init__(self, db_path: str, max_size: int = DB_POOL_MAX,
                 connect_timeout: float = DB_CONNECT_TIMEOUT,
                 idle_timeout: float = DB_IDLE_TIMEOUT):
        self.db_path = db_path
        self.max_size = max_size
        self.connect_timeout = connect_timeout
        self.idle_timeout = idle_timeout
        self._slots = threading.BoundedSemaphore(max_size)
        self._idle = []  # (conn, released_at)
        self._lock = threading.Lock()

    def _connect(self) -> sqlite3.Connection:
        uri = Path(self.db_path).resolve().as_uri() + "?mode=ro"
        conn = sqlite3.connect(uri, uri=True, timeout=self.connect_timeout,
                               check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _take_idle(self) -> Optional[sqlite3.Connection]:
        now = time.monotonic()
        with self._lock:
            fresh = []
            for conn, released_at in self._idle:
                if now - released_at > self.idle_timeout:
                    conn.close()
                else:
                    fresh.append((conn, released_at))
            self._idle = fresh
            if self._idle:
                return self._idle.pop()[0]
        return None

    def acquire(self) -> sqlite3.Connection:
        if not self._slots.acquire(timeout=self.connect_timeout):
            raise PoolTimeoutError(
                f"No connection available after {self.connect_timeout}s "
                f"(pool max={self.max_size})"
            )
        try:
            return self._take_idle() or self._connect()
        except Exception:
            self._slots.release()
            raise

    def release(self, conn: sqlite3.Connection, discard: bool = False):
        try:
            if discard:
                conn.close()
            else:
                with self._lock:
                    self._idle.append((conn, time.monotonic()))
        finally:
            self._slots.release()

    @contextmanager
    def connection(self):
        """Context manager for pooled connections. Always hands the connection back."""
        conn = self.acquire()
        discard = False
        try:
            yield conn
        except sqlite3.Error:
            discard = True
            raise
        finally:
            self.release(conn, discard=discard)

    def idle_count(self) -> int:
        with self._lock:
            return len(self._idle)

    def close(self):
        """Close every idle connection. Checked-out connections are left alone."""
        with self._lock:
            for conn, _ in self._idle:
                conn.close()
            self._idle = []


class ContactStore:
    """Read-only access to the externally owned campaign_contacts table."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    @property
    def db_path(self) -> str:
        return self.pool.db_path

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[dict]:
        with self.pool.connection() as conn:
            row = conn.execute(sql, params).fetchone()
            return dict(row) if row else None

    def fetch_all(self, sql: str, params: tuple = ()) -> list:
        with self.pool.connection() as conn:
            rows = conn.execute(sql, params).fetchall()
            return [dict(r) for r in rows]


_default_store: Optional[ContactStore] = None
_default_lock = threading.Lock()


def get_default_store() -> Optional[ContactStore]:
    """Process-wide ContactStore, built on first use. None when no data store is configured."""
    global _default_store
    path = database_path()
    if not path:
        return None
    with _default_lock:
        if _default_store is None or _default_store.db_path != path:
            logger.info("Initializing contact store pool: path=%s, max=%d", path, DB_POOL_MAX)
            _default_store = ContactStore(ConnectionPool(path))
        return _default_store
