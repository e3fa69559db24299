from __future__ import annotations

# resource_api/db.py
import enum
import logging
import sqlite3
import threading
from typing import Any, NamedTuple, Sequence

logger = logging.getLogger(__name__)

_NOW_MS = "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"

DDL = f"""
CREATE TABLE IF NOT EXISTS resources (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  description TEXT NOT NULL,
  category TEXT NOT NULL,
  price REAL NOT NULL CHECK(price >= 0),
  quantity INTEGER NOT NULL CHECK(quantity >= 0),
  created_at TEXT NOT NULL DEFAULT {_NOW_MS},
  updated_at TEXT NOT NULL DEFAULT {_NOW_MS}
);
CREATE INDEX IF NOT EXISTS idx_resources_category ON resources(category);
CREATE INDEX IF NOT EXISTS idx_resources_created ON resources(created_at);

CREATE TRIGGER IF NOT EXISTS update_resources_timestamp
AFTER UPDATE ON resources
FOR EACH ROW
BEGIN
  -- strictly after the previous stamp, even within the same millisecond
  UPDATE resources SET updated_at = CASE
    WHEN {_NOW_MS} > OLD.updated_at THEN {_NOW_MS}
    ELSE strftime('%Y-%m-%d %H:%M:%f', OLD.updated_at, '+0.001 seconds')
  END
  WHERE id = NEW.id;
END;

CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  before_json TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
"""

Params = Sequence[Any] | dict[str, Any]


class ErrorKind(str, enum.Enum):
    CONSTRAINT_VIOLATION = "constraint_violation"
    STORAGE = "storage"


class StorageError(Exception):
    """A failed statement, tagged with its kind where it was raised."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class ExecResult(NamedTuple):
    rowcount: int
    lastrowid: int | None


# integers beyond 64 bits fail at bind time with OverflowError
_BIND_ERRORS = (sqlite3.Error, OverflowError)


def _classify(err: Exception) -> StorageError:
    if isinstance(err, sqlite3.IntegrityError):
        return StorageError(ErrorKind.CONSTRAINT_VIOLATION, str(err))
    return StorageError(ErrorKind.STORAGE, str(err))


class Database:
    """
    SQLite adapter holding a single connection for the life of the process.
    Calls are serialized with a lock, so the engine only ever sees one writer.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(
                path,
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            raise _classify(e) from e
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON;")

    def initialize_schema(self) -> None:
        with self._lock:
            try:
                self._conn.executescript(DDL)
            except sqlite3.Error as e:
                raise _classify(e) from e
        logger.info("schema ready at %s", self.path)

    def execute(self, sql: str, params: Params = ()) -> ExecResult:
        with self._lock:
            try:
                cur = self._conn.execute(sql, params)
            except _BIND_ERRORS as e:
                raise _classify(e) from e
            return ExecResult(cur.rowcount, cur.lastrowid)

    def fetch_one(self, sql: str, params: Params = ()) -> sqlite3.Row | None:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchone()
            except _BIND_ERRORS as e:
                raise _classify(e) from e

    def fetch_many(self, sql: str, params: Params = ()) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except _BIND_ERRORS as e:
                raise _classify(e) from e

    def close(self) -> None:
        with self._lock:
            self._conn.close()
