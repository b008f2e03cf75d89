# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Main window: active, archived and deleted project views over the router."""

from __future__ import annotations

import logging
from typing import Any

from PyQt5.QtCore import QSettings, Qt
from PyQt5.QtWidgets import (
    QAction,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from forgetmeknots.app.config import APP_NAME, ORGANIZATION
from forgetmeknots.core.models import DEFAULT_SORT, SORTABLE_COLUMNS, column_for
from forgetmeknots.services.router import RequestRouter
from forgetmeknots.storage.project_store import ProjectStore, resolve_sort
from forgetmeknots.ui.dialogs.reports_dialog import ReportsDialog
from forgetmeknots.ui.dialogs.settings_dialog import SettingsDialog
from forgetmeknots.ui.file_picker import QtFilePicker
from forgetmeknots.ui.project_table import ProjectTableModel, ProjectTableView

log = logging.getLogger(__name__)

ACTIVE_TAB, ARCHIVED_TAB, DELETED_TAB = range(3)


class MainWindow(QMainWindow):
    """Top-level window. Also the router's host for the reports/settings views."""

    def __init__(self, store: ProjectStore, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Forget-Me-Knots")
        self.resize(1675, 800)
        self.settings = QSettings(ORGANIZATION, APP_NAME)
        self.router = RequestRouter(
            store, file_picker=QtFilePicker(self, self.settings), host=self
        )

        # The UI owns the current sort; the router is stateless.
        self._sort: dict[str, tuple[str, str]] = {
            "archived": self._load_sort("archived"),
            "deleted": self._load_sort("deleted"),
        }

        self._build_ui()
        self._build_menu()
        self._restore_geometry()
        self.refresh_all()

    # ------------------------------------------------------------------#
    def _build_ui(self) -> None:
        self.tabs = QTabWidget(self)
        self.setCentralWidget(self.tabs)

        self.active_model = ProjectTableModel(self, editable=True)
        self.archived_model = ProjectTableModel(self)
        self.deleted_model = ProjectTableModel(self)
        for model in (self.active_model, self.archived_model, self.deleted_model):
            model.important_toggled.connect(self._mark_important)

        self.active_view = ProjectTableView(self.active_model, self)
        self.archived_view = ProjectTableView(self.archived_model, self)
        self.deleted_view = ProjectTableView(self.deleted_model, self)

        self.tabs.addTab(
            self._page(
                self.active_view,
                [
                    ("Add Project", self._add_project),
                    ("Save Changes", self._save_changes),
                    ("Mark Done", self._archive_selected),
                    ("Delete", lambda: self._delete_selected(self.active_view, self.active_model)),
                ],
            ),
            "Projects",
        )
        self.tabs.addTab(
            self._page(
                self.archived_view,
                [
                    ("Un-done", self._unarchive_selected),
                    (
                        "Delete",
                        lambda: self._delete_selected(self.archived_view, self.archived_model),
                    ),
                ],
            ),
            "Completed",
        )
        self.tabs.addTab(
            self._page(
                self.deleted_view,
                [
                    ("Restore", self._restore_selected),
                    ("Delete Forever", self._purge_selected),
                    ("Empty Trash", self._purge_all),
                ],
            ),
            "Deleted",
        )

        self.archived_view.horizontalHeader().sectionClicked.connect(
            lambda section: self._change_sort("archived", self.archived_model, section)
        )
        self.deleted_view.horizontalHeader().sectionClicked.connect(
            lambda section: self._change_sort("deleted", self.deleted_model, section)
        )

    def _page(self, view: ProjectTableView, buttons) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout(page)
        layout.setContentsMargins(8, 8, 8, 8)
        row = QHBoxLayout()
        for label, slot in buttons:
            button = QPushButton(label, page)
            button.clicked.connect(slot)
            row.addWidget(button)
        row.addStretch(1)
        layout.addLayout(row)
        layout.addWidget(view, stretch=1)
        return page

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        export_action = QAction("Export Data…", self)
        export_action.triggered.connect(self.export_data)
        import_action = QAction("Import Data…", self)
        import_action.triggered.connect(self.import_data)
        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(export_action)
        file_menu.addAction(import_action)
        file_menu.addSeparator()
        file_menu.addAction(quit_action)

        view_menu = self.menuBar().addMenu("&View")
        reports_action = QAction("Reports…", self)
        reports_action.triggered.connect(lambda: self.router.dispatch("openReports"))
        settings_action = QAction("Settings…", self)
        settings_action.triggered.connect(lambda: self.router.dispatch("openSettings"))
        view_menu.addAction(reports_action)
        view_menu.addAction(settings_action)

    # ------------------------------------------------------------------#
    # Host interface

    def show_reports(self) -> None:
        ReportsDialog(self.router, self).exec_()

    def show_settings(self) -> None:
        if not self._save_changes():
            return
        dialog = SettingsDialog(self.router, self)
        dialog.data_changed.connect(self.refresh_all)
        dialog.exec_()

    # ------------------------------------------------------------------#
    # Refresh

    def refresh_all(self) -> None:
        self.active_model.set_rows(self.router.get_active_rows())
        self._refresh_sorted("archived", self.archived_model, self.archived_view)
        self._refresh_sorted("deleted", self.deleted_model, self.deleted_view)

    def _refresh_sorted(self, view_name: str, model, view) -> None:
        sort_by, sort_order = self._sort[view_name]
        payload = {"sortBy": sort_by, "sortOrder": sort_order}
        if view_name == "archived":
            model.set_rows(self.router.get_archived_rows(payload))
        else:
            model.set_rows(self.router.get_deleted_rows(payload))
        # the arrow follows the sort the store actually applied
        wanted, direction = resolve_sort(sort_by, sort_order)
        section = next(
            (
                i
                for i in range(model.columnCount())
                if column_for(model.key_for_column(i)) == wanted
            ),
            None,
        )
        header = view.horizontalHeader()
        if section is None:
            header.setSortIndicatorShown(False)
        else:
            header.setSortIndicatorShown(True)
            header.setSortIndicator(
                section, Qt.AscendingOrder if direction == "ASC" else Qt.DescendingOrder
            )

    def _change_sort(self, view_name: str, model: ProjectTableModel, section: int) -> None:
        key = model.key_for_column(section)
        if column_for(key) not in SORTABLE_COLUMNS:
            return
        current_by, current_order = self._sort[view_name]
        if column_for(key) == column_for(current_by):
            order = "ASC" if current_order == "DESC" else "DESC"
        else:
            order = "ASC"
        self._sort[view_name] = (key, order)
        self.settings.setValue(f"sort/{view_name}/by", key)
        self.settings.setValue(f"sort/{view_name}/order", order)
        view = self.archived_view if view_name == "archived" else self.deleted_view
        self._refresh_sorted(view_name, model, view)

    def _load_sort(self, view_name: str) -> tuple[str, str]:
        sort_by = self.settings.value(f"sort/{view_name}/by", DEFAULT_SORT[0], type=str)
        sort_order = self.settings.value(f"sort/{view_name}/order", DEFAULT_SORT[1], type=str)
        return sort_by, sort_order

    # ------------------------------------------------------------------#
    # Actions

    def _report(self, title: str, response: dict[str, Any]) -> bool:
        if response.get("success"):
            return True
        if response.get("canceled"):
            return False
        QMessageBox.critical(self, title, str(response.get("error", "Unknown error")))
        return False

    def _add_project(self) -> None:
        position = self.active_model.append_blank()
        self.active_view.scrollToBottom()
        self.active_view.edit(self.active_model.index(position, 1))

    def _save_changes(self) -> bool:
        """Save every edited row in the active view; stop at the first failure."""
        for position in self.active_model.dirty_rows():
            row = self.active_model.row_at(position)
            response = self.router.save_row(row)
            if not self._report("Save Failed", response):
                self.active_view.selectRow(position)
                return False
            self.active_model.mark_saved(position, int(response["id"]))
        return True

    def _selected_ids(self, view: ProjectTableView, model: ProjectTableModel) -> list[int]:
        ids = []
        for position in view.selected_positions():
            project_id = model.row_at(position).get("id")
            if project_id:
                ids.append(int(project_id))
        return ids

    def _archive_selected(self) -> None:
        # refresh_all() drops unsaved edits
        if not self._save_changes():
            return
        for project_id in self._selected_ids(self.active_view, self.active_model):
            if not self._report(
                "Archive Failed", self.router.archive_row({"id": project_id, "isArchived": True})
            ):
                break
        self.refresh_all()

    def _unarchive_selected(self) -> None:
        if not self._save_changes():
            return
        for project_id in self._selected_ids(self.archived_view, self.archived_model):
            if not self._report(
                "Restore Failed", self.router.archive_row({"id": project_id, "isArchived": False})
            ):
                break
        self.refresh_all()

    def _delete_selected(self, view: ProjectTableView, model: ProjectTableModel) -> None:
        if not self._save_changes():
            return
        for project_id in self._selected_ids(view, model):
            if not self._report("Delete Failed", self.router.delete_row({"id": project_id})):
                break
        self.refresh_all()

    def _restore_selected(self) -> None:
        if not self._save_changes():
            return
        target = None
        for project_id in self._selected_ids(self.deleted_view, self.deleted_model):
            response = self.router.restore_deleted_row({"id": project_id})
            if not self._report("Restore Failed", response):
                break
            target = ARCHIVED_TAB if response.get("archived") else ACTIVE_TAB
        self.refresh_all()
        if target is not None:
            self.tabs.setCurrentIndex(target)

    def _purge_selected(self) -> None:
        if not self._save_changes():
            return
        ids = self._selected_ids(self.deleted_view, self.deleted_model)
        if not ids:
            return
        answer = QMessageBox.question(
            self,
            "Delete Forever",
            f"Permanently delete {len(ids)} project(s)? This cannot be undone.",
        )
        if answer != QMessageBox.Yes:
            return
        for project_id in ids:
            if not self._report("Delete Failed", self.router.purge_deleted_row({"id": project_id})):
                break
        self.refresh_all()

    def _purge_all(self) -> None:
        if not self._save_changes():
            return
        answer = QMessageBox.question(
            self, "Empty Trash", "Permanently delete every deleted project?"
        )
        if answer != QMessageBox.Yes:
            return
        self._report("Delete Failed", self.router.purge_deleted_rows())
        self.refresh_all()

    def _mark_important(self, project_id: int, flag: bool) -> None:
        self._report(
            "Update Failed", self.router.mark_important({"id": project_id, "isImportant": flag})
        )

    def export_data(self) -> None:
        response = self.router.export_data()
        if self._report("Export Failed", response):
            QMessageBox.information(
                self, "Export Data", f"{response['message']}\n{response['filePath']}"
            )

    def import_data(self) -> None:
        if not self._save_changes():
            return
        response = self.router.import_data()
        if self._report("Import Failed", response):
            QMessageBox.information(self, "Import Data", response["message"])
            self.refresh_all()

    # ------------------------------------------------------------------#
    def _restore_geometry(self) -> None:
        geometry = self.settings.value("window/geometry")
        if geometry is not None:
            self.restoreGeometry(geometry)

    def closeEvent(self, event) -> None:
        if self.active_model.dirty_rows():
            answer = QMessageBox.question(
                self,
                "Unsaved Changes",
                "Some projects have unsaved changes. Quit anyway?",
            )
            if answer != QMessageBox.Yes:
                event.ignore()
                return
        self.settings.setValue("window/geometry", self.saveGeometry())
        log.info("Main window closed")
        super().closeEvent(event)
