"""
SQLite-backed store for the quilting projects table.

The store owns the schema and every query against it. Operations raise on
failure; turning failures into response envelopes is the router's job.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from forgetmeknots.core.errors import ProjectNotFoundError, ProjectValidationError
from forgetmeknots.core.models import (
    ALL_COLUMNS,
    DEFAULT_SORT,
    SORTABLE_COLUMNS,
    ProjectDraft,
    ProjectRecord,
    column_for,
)
from forgetmeknots.storage.sqlite.schema import apply_default_pragmas, ensure_schema
from forgetmeknots.storage.sqlite.utils import open_db, transaction

log = logging.getLogger(__name__)

__all__ = ["ProjectStore", "open_store", "resolve_sort"]

_SELECT_ALL = f"SELECT {', '.join(ALL_COLUMNS)} FROM projects"

_MUTABLE_COLUMNS = tuple(
    col for col in ALL_COLUMNS if col not in {"id", "archived", "deleted", "position"}
)

_DIRECTIONS = {
    "ASC": "ASC",
    "ASCENDING": "ASC",
    "DESC": "DESC",
    "DESCENDING": "DESC",
}


def resolve_sort(sort_by: str | None, sort_order: str | None) -> tuple[str, str]:
    """
    Map user supplied sort parameters onto the allow-list.

    Accepts wire (``completedDate``) or column (``completed_date``) names and
    ``ASC``/``DESC`` in any case. If either part is not recognised the pair
    falls back to ``completed_date DESC``.
    """

    column = column_for(sort_by or "")
    direction = _DIRECTIONS.get((sort_order or "").strip().upper())
    if column not in SORTABLE_COLUMNS or direction is None:
        if sort_by or sort_order:
            log.debug("Ignoring sort %r %r; using default", sort_by, sort_order)
        return DEFAULT_SORT
    return column, direction


def _import_params(index: int, record: Any) -> dict[str, Any]:
    if not isinstance(record, Mapping):
        raise ProjectValidationError(f"Record {index + 1} is not an object.")
    try:
        parsed = ProjectRecord.model_validate(dict(record))
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ProjectValidationError(f"Record {index + 1} has invalid fields: {fields}") from exc
    if parsed.id < 1:
        raise ProjectValidationError(f"Record {index + 1} has an invalid id: {parsed.id}")
    if not (parsed.date_started or "").strip():
        raise ProjectValidationError(f"Record {index + 1} has no start date.")
    if not parsed.project_name.strip():
        raise ProjectValidationError(f"Record {index + 1} has no project name.")
    values = parsed.model_dump()
    return {key: int(val) if isinstance(val, bool) else val for key, val in values.items()}


@dataclass
class ProjectStore:
    """Lightweight wrapper for the open projects database."""

    path: Path | None
    conn: sqlite3.Connection

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> ProjectStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Queries

    def list_active(self) -> list[sqlite3.Row]:
        return self.conn.execute(
            f"{_SELECT_ALL} WHERE archived = 0 AND deleted = 0 ORDER BY id"
        ).fetchall()

    def list_archived(
        self, sort_by: str | None = None, sort_order: str | None = None
    ) -> list[sqlite3.Row]:
        column, direction = resolve_sort(sort_by, sort_order)
        # column and direction come from the allow-list only
        return self.conn.execute(
            f"{_SELECT_ALL} WHERE archived = 1 AND deleted = 0"
            f" ORDER BY {column} {direction}, id {direction}"
        ).fetchall()

    def list_deleted(
        self, sort_by: str | None = None, sort_order: str | None = None
    ) -> list[sqlite3.Row]:
        column, direction = resolve_sort(sort_by, sort_order)
        return self.conn.execute(
            f"{_SELECT_ALL} WHERE deleted = 1 ORDER BY {column} {direction}, id {direction}"
        ).fetchall()

    def get(self, project_id: int) -> sqlite3.Row | None:
        return self.conn.execute(f"{_SELECT_ALL} WHERE id = ?", (project_id,)).fetchone()

    def count_active(self) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM projects WHERE archived = 0 AND deleted = 0"
        ).fetchone()
        return int(row[0])

    def count_completed(self) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM projects WHERE archived = 1 AND deleted = 0"
        ).fetchone()
        return int(row[0])

    def count_by_date_range(self, start: str, end: str) -> tuple[int, int]:
        """Return ``(open, completed)`` counts for the inclusive ``[start, end]`` range.

        Open projects are matched on ``date_started``, completed (archived)
        projects on ``completed_date``. Deleted projects are never counted.
        """

        open_row = self.conn.execute(
            """
            SELECT COUNT(*) FROM projects
            WHERE archived = 0 AND deleted = 0
            AND date_started BETWEEN ? AND ?
            """,
            (start, end),
        ).fetchone()
        completed_row = self.conn.execute(
            """
            SELECT COUNT(*) FROM projects
            WHERE archived = 1 AND deleted = 0
            AND completed_date BETWEEN ? AND ?
            """,
            (start, end),
        ).fetchone()
        return int(open_row[0]), int(completed_row[0])

    def export_all(self) -> list[dict[str, Any]]:
        rows = self.conn.execute(f"{_SELECT_ALL} ORDER BY id").fetchall()
        return [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # Commands

    def save(self, draft: ProjectDraft) -> int:
        """Insert ``draft`` when it has no id, otherwise overwrite the matching row."""

        draft.require_complete()
        values = draft.column_values()

        if draft.id is None:
            placeholders = ", ".join("?" for _ in _MUTABLE_COLUMNS)
            cur = self.conn.execute(
                f"INSERT INTO projects ({', '.join(_MUTABLE_COLUMNS)}) VALUES ({placeholders})",
                [values[col] for col in _MUTABLE_COLUMNS],
            )
            new_id = int(cur.lastrowid)
            log.info("Created project %s (%s)", new_id, draft.project_name)
            return new_id

        assignments = ", ".join(f"{col} = ?" for col in _MUTABLE_COLUMNS)
        cur = self.conn.execute(
            f"UPDATE projects SET {assignments} WHERE id = ?",
            [*(values[col] for col in _MUTABLE_COLUMNS), draft.id],
        )
        if cur.rowcount == 0:
            raise ProjectNotFoundError(draft.id)
        log.debug("Updated project %s", draft.id)
        return draft.id

    def set_archived(self, project_id: int, flag: bool) -> None:
        self.conn.execute(
            "UPDATE projects SET archived = ? WHERE id = ?", (int(bool(flag)), project_id)
        )

    def soft_delete(self, project_id: int) -> None:
        self.conn.execute("UPDATE projects SET deleted = 1 WHERE id = ?", (project_id,))

    def restore(self, project_id: int) -> bool:
        """Clear ``deleted`` and report the untouched ``archived`` flag."""

        self.conn.execute("UPDATE projects SET deleted = 0 WHERE id = ?", (project_id,))
        row = self.conn.execute(
            "SELECT archived FROM projects WHERE id = ?", (project_id,)
        ).fetchone()
        return bool(row["archived"]) if row is not None else False

    def purge(self, project_id: int) -> None:
        self.conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))

    def purge_all_deleted(self) -> int:
        cur = self.conn.execute("DELETE FROM projects WHERE deleted = 1")
        log.info("Purged %s deleted projects", cur.rowcount)
        return cur.rowcount

    def set_important(self, project_id: int, flag: bool) -> None:
        self.conn.execute(
            "UPDATE projects SET important = ? WHERE id = ?", (int(bool(flag)), project_id)
        )

    def import_all(self, records: Iterable[Any]) -> int:
        """
        Insert backup records, keeping their ids and lifecycle flags.

        All records go in one transaction; the first bad record rolls back the
        whole batch and its error is re-raised.
        """

        columns = ", ".join(ALL_COLUMNS)
        named = ", ".join(f":{col}" for col in ALL_COLUMNS)
        sql = f"INSERT INTO projects ({columns}) VALUES ({named})"

        count = 0
        with transaction(self.conn):
            for index, record in enumerate(records):
                self.conn.execute(sql, _import_params(index, record))
                count += 1
        log.info("Imported %s projects", count)
        return count


def open_store(path: str | Path) -> ProjectStore:
    """Open (creating if needed) the projects database at ``path``."""

    in_memory = str(path) == ":memory:"
    conn = open_db(path)
    try:
        apply_default_pragmas(conn, in_memory=in_memory)
        ensure_schema(conn)
    except sqlite3.Error:
        conn.close()
        raise
    log.info("Opened projects database %s", path)
    return ProjectStore(path=None if in_memory else Path(path), conn=conn)
