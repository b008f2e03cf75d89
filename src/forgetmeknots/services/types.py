"""Service interfaces and typing helpers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["Envelope", "FilePicker", "Host"]

# Every router response is a plain dict so it can cross a process boundary
# unchanged: ``{"success": True, ...}`` or ``{"success": False, "error": ...}``.
Envelope = dict[str, Any]


@runtime_checkable
class FilePicker(Protocol):
    """Capability to ask the user for a backup file location.

    Returning ``None`` means the user cancelled.
    """

    def choose_export_path(self, default_name: str) -> str | None: ...

    def choose_import_path(self) -> str | None: ...


@runtime_checkable
class Host(Protocol):
    """The window host that can present the secondary views."""

    def show_reports(self) -> None: ...

    def show_settings(self) -> None: ...
