"""SQLite-backed storage for instance config, clients and subscriptions."""

import sqlite3
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

from wildebeest.errors import Conflict, WildebeestError

logger = structlog.get_logger()

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS instance_config (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    title TEXT,
    uri TEXT,
    email TEXT,
    description TEXT,
    short_description TEXT,
    vapid_public_key TEXT,
    vapid_private_key TEXT
);
CREATE TABLE IF NOT EXISTS clients (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    website TEXT,
    redirect_uri TEXT NOT NULL,
    scopes TEXT NOT NULL,
    secret TEXT NOT NULL,
    created_at REAL NOT NULL
);
CREATE TABLE IF NOT EXISTS subscriptions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    actor_id TEXT NOT NULL,
    client_id TEXT NOT NULL,
    endpoint TEXT NOT NULL,
    key_p256dh TEXT NOT NULL,
    key_auth TEXT NOT NULL,
    alerts TEXT NOT NULL DEFAULT '{}',
    policy TEXT NOT NULL DEFAULT 'all',
    created_at REAL NOT NULL,
    updated_at REAL NOT NULL,
    UNIQUE (actor_id, client_id)
);
"""

Params = Sequence[Any]


class Database:
    """Shared SQLite connection with a minimal command/query interface.

    One connection is opened lazily and reused across threads. Writes
    go through transaction(), which holds a process-level lock so a
    multi-statement write is never interleaved with another one.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def _connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(
            str(self._db_path),
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.executescript(_SCHEMA)
        self._conn = conn
        return conn

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed statements atomically.

        Nested use joins the outer transaction.

        Raises:
            Conflict: If a uniqueness constraint rejects a write.
        """
        with self._lock:
            conn = self._connect()
            if conn.in_transaction:
                yield
                return
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield
            except sqlite3.IntegrityError as e:
                conn.execute("ROLLBACK")
                logger.debug("storage_conflict", error=str(e))
                raise Conflict(str(e)) from e
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def execute(self, sql: str, params: Params = ()) -> int:
        """Run a write statement and return the affected row count."""
        with self.transaction():
            cur = self._connect().execute(sql, params)
            return cur.rowcount

    def execute_returning(self, sql: str, params: Params = ()) -> sqlite3.Row:
        """Run a write statement with a RETURNING clause and return its row.

        Raises:
            WildebeestError: If the statement produced no row.
        """
        with self.transaction():
            rows = self._connect().execute(sql, params).fetchall()
        if not rows:
            raise WildebeestError("write returned no row")
        return rows[0]

    def fetch_one(self, sql: str, params: Params = ()) -> sqlite3.Row | None:
        with self._lock:
            return self._connect().execute(sql, params).fetchone()

    def fetch_all(self, sql: str, params: Params = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._connect().execute(sql, params).fetchall()

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
