"""
Base database connection and initialization.

This module handles database connection management and schema initialization.
Optimized for SQLite concurrency with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the DI layer.
Use core.dependencies.get_database() instead of instantiating directly.
Per-request connections come from core.dependencies.get_session(), which
wraps Database.session().
"""
import sqlite3
import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from pathlib import Path

from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT

logger = logging.getLogger(__name__)


def _casefold(value):
    """SQL function: Unicode-aware lower-casing (SQLite lower() is ASCII only)."""
    return value.casefold() if isinstance(value, str) else value


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS patients (
        patient_id INTEGER PRIMARY KEY AUTOINCREMENT,
        first_name TEXT NOT NULL DEFAULT '',
        last_name TEXT NOT NULL DEFAULT '',
        patronymic TEXT NOT NULL DEFAULT '',
        birth_date TEXT,
        pension_number TEXT NOT NULL UNIQUE
    )
    """,
    # Consultations are written by a separate subsystem; the table is created
    # here so the patient detail view can read them.
    """
    CREATE TABLE IF NOT EXISTS consultations (
        consultation_id INTEGER PRIMARY KEY AUTOINCREMENT,
        patient_id INTEGER NOT NULL,
        date TEXT NOT NULL,
        symptoms TEXT NOT NULL DEFAULT '',
        diagnosis TEXT NOT NULL DEFAULT '',
        recommendations TEXT NOT NULL DEFAULT '',
        FOREIGN KEY (patient_id) REFERENCES patients(patient_id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_consultations_patient_id ON consultations (patient_id)",
)


class Database:
    """
    SQLite database connection manager with concurrency optimizations.

    Features:
    - WAL mode for better concurrent read/write performance
    - Busy timeout to handle lock contention gracefully
    - Foreign key constraints enabled on every connection
    - Scoped sessions: commit on success, rollback on error, always close

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_database
        db = get_database()

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
        with db.session() as conn:
            conn.execute("SELECT 1")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize the database and create the schema if needed.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        """Apply busy timeout, foreign keys and SQL helper functions to a connection."""
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")
        conn.execute("PRAGMA foreign_keys = ON")
        conn.create_function("casefold", 1, _casefold, deterministic=True)

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        try:
            self._configure_connection(conn)
            cursor = conn.cursor()

            # WAL mode persists in the database file, so this only needs to run once
            cursor.execute("PRAGMA journal_mode = WAL")
            result = cursor.fetchone()
            if result and result[0].lower() == 'wal':
                logger.info(f"SQLite WAL mode enabled for {self.db_path}")
            else:
                logger.warning(f"Failed to enable WAL mode, current mode: {result}")

            for statement in SCHEMA:
                cursor.execute(statement)

            conn.commit()
        finally:
            conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with concurrency settings.

        Rows are returned as sqlite3.Row so columns can be read by name.
        The caller owns the connection and must close it; prefer session().
        A connection may be handed between threads (FastAPI runs sync
        dependencies in a threadpool) but is never used concurrently.
        """
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        self._configure_connection(conn)
        return conn

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        """
        Open a connection scoped to one unit of work.

        Commits when the block exits normally, rolls back when it raises,
        and closes the connection on every exit path.
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()
