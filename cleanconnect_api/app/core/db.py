"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and JSON helpers for the document‑like columns.  Nested
values of an identity or job (addresses, service details, availability
slots and so on) are stored as JSON text so each record stays a single
row that is read and written as a whole.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import json
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from .config import settings


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: identities, jobs and reviews
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS clients (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            phone TEXT NOT NULL,
            password TEXT NOT NULL,
            addresses TEXT NOT NULL DEFAULT '[]',
            language TEXT NOT NULL DEFAULT 'he',
            created_at TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS providers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            phone TEXT NOT NULL,
            password TEXT NOT NULL,
            service_types TEXT NOT NULL DEFAULT '[]',
            service_details TEXT NOT NULL DEFAULT '[]',
            service_areas TEXT NOT NULL DEFAULT '[]',
            hourly_rate REAL NOT NULL DEFAULT 0,
            availability TEXT NOT NULL DEFAULT '[]',
            rating REAL NOT NULL DEFAULT 0,
            legacy_reviews TEXT NOT NULL DEFAULT '[]',
            language TEXT NOT NULL DEFAULT 'he',
            profile_image TEXT NOT NULL DEFAULT '',
            bio TEXT NOT NULL DEFAULT '',
            experience INTEGER NOT NULL DEFAULT 0,
            certifications TEXT NOT NULL DEFAULT '[]',
            created_at TIMESTAMP NOT NULL,
            last_active TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS jobs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            client_id INTEGER NOT NULL,
            provider_id INTEGER NOT NULL,
            service_type TEXT NOT NULL,
            property_type TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            scheduled_date TIMESTAMP NOT NULL,
            address TEXT NOT NULL,
            description TEXT,
            price REAL,
            decline_reason TEXT,
            completion_notes TEXT,
            completed_at TIMESTAMP,
            created_at TIMESTAMP NOT NULL,
            FOREIGN KEY(client_id) REFERENCES clients(id),
            FOREIGN KEY(provider_id) REFERENCES providers(id)
        );

        CREATE TABLE IF NOT EXISTS reviews (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            provider_id INTEGER NOT NULL,
            client_id INTEGER NOT NULL,
            rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
            comment TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP NOT NULL,
            UNIQUE(provider_id, client_id),
            FOREIGN KEY(provider_id) REFERENCES providers(id),
            FOREIGN KEY(client_id) REFERENCES clients(id)
        );
        """,
    ),
    # Migration 2: indices for the per‑provider lookups
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_jobs_provider_id ON jobs(provider_id);
        CREATE INDEX IF NOT EXISTS idx_jobs_client_id ON jobs(client_id);
        CREATE INDEX IF NOT EXISTS idx_reviews_provider_id ON reviews(provider_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # cleanconnect_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is enabled for the lifetime of the
    connection.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor, commits on success and always closes."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  New migrations must be appended with an
    incremented version number.
    """
    with get_cursor() as cursor:
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
                current_version = version


def utc_now() -> str:
    """Current UTC time as an ISO‑8601 string, the format every timestamp column uses."""
    return datetime.now(timezone.utc).isoformat()


def dump_json(value: Any) -> str:
    return json.dumps(value if value is not None else [], ensure_ascii=False)


def load_json(value: str | None, default: Any = None) -> Any:
    if value is None or value == "":
        return [] if default is None else default
    return json.loads(value)
