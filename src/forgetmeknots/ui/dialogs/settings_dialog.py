"""Settings window: data location plus backup export and import."""

from __future__ import annotations

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
)

from forgetmeknots.services.router import RequestRouter


class SettingsDialog(QDialog):
    """Emits ``data_changed`` after a successful import so views can reload."""

    data_changed = pyqtSignal()

    def __init__(self, router: RequestRouter, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.resize(600, 500)
        self.router = router
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        form = QFormLayout()
        db_path = self.router.store.path
        location = QLabel(str(db_path) if db_path else "(in memory)", self)
        location.setTextInteractionFlags(Qt.TextSelectableByMouse)
        location.setWordWrap(True)
        form.addRow("Database:", location)
        layout.addLayout(form)

        intro = QLabel(
            "Export writes every project, including archived and deleted ones, to a JSON "
            "file. Import adds the projects from such a file; nothing is imported if any "
            "record is invalid.",
            self,
        )
        intro.setWordWrap(True)
        layout.addWidget(intro)

        row = QHBoxLayout()
        export_button = QPushButton("Export Data…", self)
        export_button.clicked.connect(self._export)
        import_button = QPushButton("Import Data…", self)
        import_button.clicked.connect(self._import)
        row.addWidget(export_button)
        row.addWidget(import_button)
        row.addStretch(1)
        layout.addLayout(row)
        layout.addStretch(1)

        buttons = QDialogButtonBox(QDialogButtonBox.Close, Qt.Horizontal, self)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _export(self) -> None:
        response = self.router.dispatch("exportData")
        if response.get("success"):
            QMessageBox.information(
                self, "Export Data", f"{response['message']}\n{response['filePath']}"
            )
        elif not response.get("canceled"):
            QMessageBox.critical(self, "Export Failed", response.get("error", "Export failed."))

    def _import(self) -> None:
        response = self.router.dispatch("importData")
        if response.get("success"):
            QMessageBox.information(self, "Import Data", response["message"])
            self.data_changed.emit()
        elif not response.get("canceled"):
            QMessageBox.critical(self, "Import Failed", response.get("error", "Import failed."))
