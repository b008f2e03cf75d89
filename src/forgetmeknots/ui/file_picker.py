"""Qt file dialogs for choosing backup locations."""

from __future__ import annotations

from pathlib import Path

from PyQt5.QtCore import QSettings
from PyQt5.QtWidgets import QFileDialog, QWidget

from forgetmeknots.services.transfer import FILE_FILTER


class QtFilePicker:
    """File picker backed by native dialogs; remembers the last directory used."""

    def __init__(self, parent: QWidget | None, settings: QSettings) -> None:
        self._parent = parent
        self._settings = settings

    def _last_dir(self) -> str:
        return self._settings.value("paths/last_backup_directory", str(Path.home()), type=str)

    def _remember(self, path: str) -> None:
        self._settings.setValue("paths/last_backup_directory", str(Path(path).parent))

    def choose_export_path(self, default_name: str) -> str | None:
        path, _ = QFileDialog.getSaveFileName(
            self._parent,
            "Export Data",
            str(Path(self._last_dir()) / default_name),
            FILE_FILTER,
        )
        if not path:
            return None
        self._remember(path)
        return path

    def choose_import_path(self) -> str | None:
        path, _ = QFileDialog.getOpenFileName(
            self._parent, "Import Data", self._last_dir(), FILE_FILTER
        )
        if not path:
            return None
        self._remember(path)
        return path
