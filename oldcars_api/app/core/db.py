"""
SQLite document storage and simple migration system.

Cars are kept as JSON documents in a single ``car`` table whose primary
key is the car identifier.  This module provides the
:class:`ConnectionPool` handle that the car service receives at
construction, plus ``init_db`` which applies migrations on application
start.

The pool does not keep connections around: ``acquire`` opens a private
connection for one operation and closes it on exit, whatever the
outcome.  Applied migration versions are stored in the ``migrations``
table and new migrations are executed in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import CarStoreError

logger = logging.getLogger(__name__)

SQLITE_URL_PREFIX = "sqlite:///"

CAR_COLLECTION = "car"


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    ``database_url`` may be a plain path or a ``sqlite:///`` URL.  An
    absolute path is used directly, otherwise it is resolved relative to
    the package root.
    """
    db_url = database_url
    if db_url.startswith(SQLITE_URL_PREFIX):
        db_url = db_url[len(SQLITE_URL_PREFIX):]
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # oldcars_api/
    return str((base_dir / db_url).resolve())


class ConnectionPool:
    """Process-wide handle to the car database.

    Created once at startup and shared by all requests.  Each operation
    calls :meth:`acquire` to obtain its own short-lived connection.
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self.path = path
        self.timeout = timeout

    @classmethod
    def from_url(cls, database_url: str, timeout: float = 5.0) -> "ConnectionPool":
        return cls(resolve_database_path(database_url), timeout=timeout)

    def connect(self) -> sqlite3.Connection:
        """Open a new connection with rows addressable by column name."""
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def acquire(self) -> Iterator[sqlite3.Connection]:
        """Yield a fresh connection, commit on success and always close it."""
        conn = self.connect()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def ping(self) -> None:
        """Check that the database can be opened and queried.

        Raises
        ------
        CarStoreError
            With kind ``TRANSPORT`` if the database is unreachable.
        """
        try:
            with self.acquire() as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as exc:
            raise CarStoreError.transport(f"Cannot open database {self.path}: {exc}") from exc


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: car documents keyed by their identifier
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS {CAR_COLLECTION} (
            id TEXT PRIMARY KEY,
            document TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: index the year for range lookups
    (
        2,
        f"""
        CREATE INDEX IF NOT EXISTS idx_{CAR_COLLECTION}_year
            ON {CAR_COLLECTION} (json_extract(document, '$.year'));
        """,
    ),
]


def init_db(pool: ConnectionPool) -> int:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  Returns the schema version after migration.
    """
    with pool.acquire() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s", version)
                current_version = version
    return current_version
