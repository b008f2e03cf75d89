# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Typed records exchanged between the UI and the project store.

Field names are snake_case and match the SQLite columns; the camelCase aliases
are the names used on the wire between the UI and the request router.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel

from forgetmeknots.core.errors import ProjectValidationError

__all__ = [
    "MILESTONE_COLUMNS",
    "SORTABLE_COLUMNS",
    "ALL_COLUMNS",
    "DEFAULT_SORT",
    "ProjectRecord",
    "ProjectDraft",
    "RowRequest",
    "ArchiveRequest",
    "ImportantRequest",
    "SortRequest",
    "DateRangeRequest",
    "FileRequest",
    "column_for",
]

MILESTONE_COLUMNS: Final[tuple[str, ...]] = (
    "fabric_chosen",
    "cut",
    "pieced",
    "assembled",
    "back_prepped",
    "basted",
    "quilted",
    "bound",
    "photographed",
)

SORTABLE_COLUMNS: Final[tuple[str, ...]] = (
    "date_started",
    "completed_date",
    "project_name",
    *MILESTONE_COLUMNS,
)

ALL_COLUMNS: Final[tuple[str, ...]] = (
    "id",
    "date_started",
    "completed_date",
    "project_name",
    *MILESTONE_COLUMNS,
    "archived",
    "deleted",
    "position",
    "important",
)

DEFAULT_SORT: Final[tuple[str, str]] = ("completed_date", "DESC")

_WIRE_TO_COLUMN: Final[dict[str, str]] = {to_camel(col): col for col in ALL_COLUMNS}


def column_for(name: str) -> str | None:
    """Return the column for a wire (``dateStarted``) or column (``date_started``) name."""

    if name in ALL_COLUMNS:
        return name
    return _WIRE_TO_COLUMN.get(name)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProjectRecord(_WireModel):
    """One row of the ``projects`` table as returned to the UI."""

    id: int
    date_started: str | None = None
    completed_date: str | None = None
    project_name: str
    fabric_chosen: bool = False
    cut: bool = False
    pieced: bool = False
    assembled: bool = False
    back_prepped: bool = False
    basted: bool = False
    quilted: bool = False
    bound: bool = False
    photographed: bool = False
    important: bool = False
    archived: bool = False
    deleted: bool = False
    position: int = 0

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ProjectDraft(_WireModel):
    """Payload of a save: a new project when ``id`` is missing, else a full overwrite."""

    id: PositiveInt | None = None
    date_started: str = ""
    completed_date: str | None = None
    project_name: str = ""
    fabric_chosen: bool = False
    cut: bool = False
    pieced: bool = False
    assembled: bool = False
    back_prepped: bool = False
    basted: bool = False
    quilted: bool = False
    bound: bool = False
    photographed: bool = False
    important: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_means_new(cls, value: Any) -> Any:
        if value in (None, "", 0):
            return None
        return value

    @field_validator("date_started", "project_name", mode="before")
    @classmethod
    def _none_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("date_started", "completed_date", "project_name")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if isinstance(value, str) else value

    @field_validator("completed_date")
    @classmethod
    def _blank_completed_is_null(cls, value: str | None) -> str | None:
        return value or None

    def require_complete(self) -> None:
        """Raise :class:`ProjectValidationError` if a required field is empty."""

        if not self.date_started:
            raise ProjectValidationError("Start date is required.")
        if not self.project_name:
            raise ProjectValidationError("Project name is required.")

    def column_values(self) -> dict[str, Any]:
        """Mutable column values ready for binding, booleans stored as 0/1."""

        values = self.model_dump(exclude={"id"})
        return {key: int(val) if isinstance(val, bool) else val for key, val in values.items()}


class RowRequest(_WireModel):
    id: PositiveInt


class ArchiveRequest(RowRequest):
    is_archived: bool


class ImportantRequest(RowRequest):
    is_important: bool


class SortRequest(_WireModel):
    """Sort parameters for the archived and deleted views; resolved by the store."""

    sort_by: str = DEFAULT_SORT[0]
    sort_order: str = DEFAULT_SORT[1]

    @field_validator("sort_by", "sort_order", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        # Unknown input falls back later; never reject here.
        return "" if value is None else str(value)


class DateRangeRequest(_WireModel):
    start_date: str = ""
    end_date: str = ""

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    def require_complete(self) -> None:
        if not self.start_date or not self.end_date:
            raise ProjectValidationError("Please select both start and end dates.")


class FileRequest(_WireModel):
    file_path: str | None = Field(default=None)
