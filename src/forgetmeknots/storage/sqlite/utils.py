"""
Connection and transaction helpers for the SQLite project database.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

__all__ = ["open_db", "transaction"]


# ---- Connections ------------------------------------------------------------


def open_db(path: str | Path, *, mode: str = "rwc") -> sqlite3.Connection:
    """
    Open the project database in autocommit mode with ``sqlite3.Row`` rows.

    mode: "ro" (read-only), "rw", "rwc" (create if needed). Default: "rwc".
    Multi-statement writes must go through :func:`transaction`.
    """
    if str(path) == ":memory:":
        conn = sqlite3.connect(":memory:", isolation_level=None)
    else:
        db_path = Path(path)
        if mode == "rwc":
            db_path.parent.mkdir(parents=True, exist_ok=True)
        uri = f"{db_path.resolve().as_uri()}?mode={mode}"
        conn = sqlite3.connect(uri, uri=True, isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn


# ---- Transactions -----------------------------------------------------------


@contextmanager
def transaction(
    conn: sqlite3.Connection,
    *,
    begin: str = "BEGIN IMMEDIATE",
) -> Iterator[sqlite3.Connection]:
    """
    Commit on success, roll back everything on error and re-raise.
    """

    conn.execute(begin)
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")
