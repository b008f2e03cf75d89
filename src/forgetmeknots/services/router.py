# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Named-operation request router between the UI and the project store.

Every operation takes one structured argument (a mapping with camelCase
keys, or nothing) and returns a plain-dict envelope: ``{"success": True,
...}`` or ``{"success": False, "error": "..."}``. List operations return the
records themselves and degrade to an empty list on failure. Nothing raises
past :meth:`RequestRouter.dispatch`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from forgetmeknots.core.errors import ForgetMeKnotsError, ProjectValidationError
from forgetmeknots.core.models import (
    ArchiveRequest,
    DateRangeRequest,
    FileRequest,
    ImportantRequest,
    ProjectDraft,
    ProjectRecord,
    RowRequest,
    SortRequest,
)
from forgetmeknots.services import reports, transfer
from forgetmeknots.services.types import Envelope, FilePicker, Host
from forgetmeknots.storage.project_store import ProjectStore

log = logging.getLogger(__name__)

__all__ = ["OPERATIONS", "RequestRouter", "describe_validation_error"]

ModelT = TypeVar("ModelT", bound=BaseModel)

OPERATIONS: tuple[str, ...] = (
    "getActiveRows",
    "saveRow",
    "getArchivedRows",
    "archiveRow",
    "deleteRow",
    "getDeletedRows",
    "restoreDeletedRow",
    "purgeDeletedRow",
    "purgeDeletedRows",
    "markImportant",
    "getTotalOpenProjects",
    "getTotalCompletedProjects",
    "getProjectsByDateRange",
    "getMilestoneSummary",
    "exportData",
    "importData",
    "openReports",
    "openSettings",
)


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Flatten a pydantic error into one human-readable line."""

    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts) or "Invalid request."


def _failure(exc: BaseException) -> Envelope:
    return {"success": False, "error": str(exc) or exc.__class__.__name__}


class RequestRouter:
    """Dispatch table from operation name to a store-backed handler."""

    def __init__(
        self,
        store: ProjectStore,
        *,
        file_picker: FilePicker | None = None,
        host: Host | None = None,
    ) -> None:
        self.store = store
        self.file_picker = file_picker
        self.host = host
        self._handlers: dict[str, Callable[[Any], Any]] = {
            "getActiveRows": self.get_active_rows,
            "saveRow": self.save_row,
            "getArchivedRows": self.get_archived_rows,
            "archiveRow": self.archive_row,
            "deleteRow": self.delete_row,
            "getDeletedRows": self.get_deleted_rows,
            "restoreDeletedRow": self.restore_deleted_row,
            "purgeDeletedRow": self.purge_deleted_row,
            "purgeDeletedRows": self.purge_deleted_rows,
            "markImportant": self.mark_important,
            "getTotalOpenProjects": self.get_total_open_projects,
            "getTotalCompletedProjects": self.get_total_completed_projects,
            "getProjectsByDateRange": self.get_projects_by_date_range,
            "getMilestoneSummary": self.get_milestone_summary,
            "exportData": self.export_data,
            "importData": self.import_data,
            "openReports": self.open_reports,
            "openSettings": self.open_settings,
        }

    @property
    def operations(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def dispatch(self, name: str, payload: Any = None) -> Any:
        """Run operation ``name`` with ``payload`` and return its envelope."""

        handler = self._handlers.get(name)
        if handler is None:
            log.warning("Unknown operation requested: %r", name)
            return {"success": False, "error": f"Unknown operation: {name}"}
        return handler(payload)

    # ------------------------------------------------------------------
    # Boundary helpers

    @staticmethod
    def _parse(model: type[ModelT], payload: Any) -> ModelT:
        if payload is None:
            payload = {}
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True)
        if not isinstance(payload, Mapping):
            raise ProjectValidationError("Request payload must be an object.")
        try:
            return model.model_validate(dict(payload))
        except PydanticValidationError as exc:
            raise ProjectValidationError(describe_validation_error(exc)) from exc

    def _command(self, operation: str, func: Callable[[], Envelope]) -> Envelope:
        try:
            result = func()
        except ForgetMeKnotsError as exc:
            log.info("%s rejected: %s", operation, exc)
            return _failure(exc)
        except Exception as exc:
            log.exception("%s failed", operation)
            return _failure(exc)
        return {"success": True, **result}

    def _query(self, operation: str, func: Callable[[], list]) -> list[dict[str, Any]]:
        try:
            rows = func()
            return [ProjectRecord.model_validate(dict(row)).to_wire() for row in rows]
        except Exception:
            log.exception("%s failed; returning no rows", operation)
            return []

    # ------------------------------------------------------------------
    # Lists

    def get_active_rows(self, payload: Any = None) -> list[dict[str, Any]]:
        return self._query("getActiveRows", self.store.list_active)

    def get_archived_rows(self, payload: Any = None) -> list[dict[str, Any]]:
        def run() -> list:
            sort = self._parse(SortRequest, payload)
            return self.store.list_archived(sort.sort_by, sort.sort_order)

        return self._query("getArchivedRows", run)

    def get_deleted_rows(self, payload: Any = None) -> list[dict[str, Any]]:
        def run() -> list:
            sort = self._parse(SortRequest, payload)
            return self.store.list_deleted(sort.sort_by, sort.sort_order)

        return self._query("getDeletedRows", run)

    # ------------------------------------------------------------------
    # Writes

    def save_row(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            draft = self._parse(ProjectDraft, payload)
            return {"id": self.store.save(draft)}

        return self._command("saveRow", run)

    def archive_row(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            req = self._parse(ArchiveRequest, payload)
            self.store.set_archived(req.id, req.is_archived)
            return {}

        return self._command("archiveRow", run)

    def delete_row(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            req = self._parse(RowRequest, payload)
            self.store.soft_delete(req.id)
            return {}

        return self._command("deleteRow", run)

    def restore_deleted_row(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            req = self._parse(RowRequest, payload)
            return {"archived": self.store.restore(req.id)}

        return self._command("restoreDeletedRow", run)

    def purge_deleted_row(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            req = self._parse(RowRequest, payload)
            self.store.purge(req.id)
            return {}

        return self._command("purgeDeletedRow", run)

    def purge_deleted_rows(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            self.store.purge_all_deleted()
            return {}

        return self._command("purgeDeletedRows", run)

    def mark_important(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            req = self._parse(ImportantRequest, payload)
            self.store.set_important(req.id, req.is_important)
            return {}

        return self._command("markImportant", run)

    # ------------------------------------------------------------------
    # Reports

    def get_total_open_projects(self, payload: Any = None) -> Envelope:
        return self._command("getTotalOpenProjects", lambda: {"total": self.store.count_active()})

    def get_total_completed_projects(self, payload: Any = None) -> Envelope:
        return self._command(
            "getTotalCompletedProjects", lambda: {"total": self.store.count_completed()}
        )

    def get_projects_by_date_range(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            req = self._parse(DateRangeRequest, payload)
            req.require_complete()
            open_count, completed_count = self.store.count_by_date_range(
                req.start_date, req.end_date
            )
            return {"openProjects": open_count, "completedProjects": completed_count}

        return self._command("getProjectsByDateRange", run)

    def get_milestone_summary(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            records = [dict(row) for row in self.store.list_active()]
            frame = reports.milestone_summary(records)
            milestones = [
                {
                    "milestone": str(row.milestone),
                    "label": str(row.label),
                    "done": int(row.done),
                    "total": int(row.total),
                    "percent": float(row.percent),
                }
                for row in frame.itertuples(index=False)
            ]
            return {"milestones": milestones}

        return self._command("getMilestoneSummary", run)

    # ------------------------------------------------------------------
    # Backup files

    def _requested_path(self, payload: Any) -> str | None:
        path = self._parse(FileRequest, payload).file_path
        if path is not None and not path.strip():
            raise ProjectValidationError("File path must not be empty.")
        return path

    def export_data(self, payload: Any = None) -> Envelope:
        try:
            path = self._requested_path(payload)
            if path is None:
                if self.file_picker is None:
                    raise ProjectValidationError("No export location was given.")
                path = self.file_picker.choose_export_path(transfer.DEFAULT_EXPORT_NAME)
        except Exception as exc:
            log.warning("exportData failed: %s", exc)
            return _failure(exc)
        if not path:
            return {"success": False, "canceled": True, "message": "Export canceled."}

        def run() -> Envelope:
            target = transfer.write_backup(path, self.store.export_all())
            return {"message": "Data exported successfully!", "filePath": str(target)}

        return self._command("exportData", run)

    def import_data(self, payload: Any = None) -> Envelope:
        try:
            path = self._requested_path(payload)
            if path is None:
                if self.file_picker is None:
                    raise ProjectValidationError("No file to import was given.")
                path = self.file_picker.choose_import_path()
        except Exception as exc:
            log.warning("importData failed: %s", exc)
            return _failure(exc)
        if not path:
            return {"success": False, "canceled": True, "message": "Import canceled."}

        def run() -> Envelope:
            imported = self.store.import_all(transfer.read_backup(path))
            return {"message": "Data imported successfully!", "imported": imported}

        return self._command("importData", run)

    # ------------------------------------------------------------------
    # Host signals

    def open_reports(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            if self.host is not None:
                self.host.show_reports()
            return {}

        return self._command("openReports", run)

    def open_settings(self, payload: Any = None) -> Envelope:
        def run() -> Envelope:
            if self.host is not None:
                self.host.show_settings()
            return {}

        return self._command("openSettings", run)
