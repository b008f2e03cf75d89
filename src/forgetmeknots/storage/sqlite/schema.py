"""
Schema and pragma setup for the projects database.
"""

from __future__ import annotations

import logging
import sqlite3

__all__ = [
    "SCHEMA_VERSION",
    "apply_default_pragmas",
    "ensure_schema",
    "get_user_version",
    "set_user_version",
]

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_PROJECTS_DDL = """
CREATE TABLE IF NOT EXISTS projects (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date_started TEXT,
    completed_date TEXT,
    project_name TEXT NOT NULL,
    fabric_chosen INTEGER DEFAULT 0,
    cut INTEGER DEFAULT 0,
    pieced INTEGER DEFAULT 0,
    assembled INTEGER DEFAULT 0,
    back_prepped INTEGER DEFAULT 0,
    basted INTEGER DEFAULT 0,
    quilted INTEGER DEFAULT 0,
    bound INTEGER DEFAULT 0,
    photographed INTEGER DEFAULT 0,
    archived INTEGER DEFAULT 0,
    deleted INTEGER DEFAULT 0,
    position INTEGER DEFAULT 0,
    important INTEGER DEFAULT 0
);
"""


def apply_default_pragmas(conn: sqlite3.Connection, *, in_memory: bool = False) -> None:
    """
    Pragmas for a local, single-writer database file.

    WAL is skipped for in-memory databases where it has no effect.
    """
    conn.execute("PRAGMA foreign_keys = ON;")
    if not in_memory:
        conn.execute("PRAGMA journal_mode = WAL;")
        conn.execute("PRAGMA synchronous = NORMAL;")
    conn.execute("PRAGMA temp_store = MEMORY;")
    conn.execute("PRAGMA busy_timeout = 5000;")


def get_user_version(conn: sqlite3.Connection) -> int:
    row = conn.execute("PRAGMA user_version").fetchone()
    return int(row[0]) if row else 0


def set_user_version(conn: sqlite3.Connection, version: int) -> None:
    conn.execute(f"PRAGMA user_version = {int(version)}")


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the projects table if missing and stamp the schema version.

    Databases created by earlier releases carry ``user_version`` 0 but the
    same table layout, so they are stamped in place.
    """

    conn.executescript(_PROJECTS_DDL)
    current = get_user_version(conn)
    if current < SCHEMA_VERSION:
        log.info("Stamping projects schema version %s (was %s)", SCHEMA_VERSION, current)
        set_user_version(conn, SCHEMA_VERSION)
    elif current > SCHEMA_VERSION:
        log.warning(
            "Database schema version %s is newer than supported version %s",
            current,
            SCHEMA_VERSION,
        )
