"""Table model and view for project rows in the active, archived and deleted views."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from PyQt5.QtCore import QAbstractTableModel, QModelIndex, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor
from PyQt5.QtWidgets import QAbstractItemView, QHeaderView, QTableView

from forgetmeknots.services.reports import MILESTONE_LABELS

DEFAULT_QMODEL_INDEX = QModelIndex()
IMPORTANT_COLOR = QColor(255, 244, 204)

# (wire key, header, is_flag)
COLUMNS: list[tuple[str, str, bool]] = [
    ("important", "★", True),
    ("dateStarted", "Started", False),
    ("completedDate", "Completed", False),
    ("projectName", "Project", False),
    ("fabricChosen", MILESTONE_LABELS["fabric_chosen"], True),
    ("cut", MILESTONE_LABELS["cut"], True),
    ("pieced", MILESTONE_LABELS["pieced"], True),
    ("assembled", MILESTONE_LABELS["assembled"], True),
    ("backPrepped", MILESTONE_LABELS["back_prepped"], True),
    ("basted", MILESTONE_LABELS["basted"], True),
    ("quilted", MILESTONE_LABELS["quilted"], True),
    ("bound", MILESTONE_LABELS["bound"], True),
    ("photographed", MILESTONE_LABELS["photographed"], True),
]
IMPORTANT_COLUMN = 0
NAME_COLUMN = 3


def blank_row() -> dict[str, Any]:
    row: dict[str, Any] = {key: (False if is_flag else "") for key, _, is_flag in COLUMNS}
    row["id"] = None
    return row


class ProjectTableModel(QAbstractTableModel):
    """Holds wire-format project records; editable only in the active view."""

    important_toggled = pyqtSignal(int, bool)

    def __init__(self, parent=None, *, editable: bool = False) -> None:
        super().__init__(parent)
        self._rows: list[dict[str, Any]] = []
        self._dirty: set[int] = set()
        self.editable = editable

    # Qt model API -----------------------------------------------------
    def rowCount(self, parent: QModelIndex = DEFAULT_QMODEL_INDEX) -> int:
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex = DEFAULT_QMODEL_INDEX) -> int:
        return 0 if parent.isValid() else len(COLUMNS)

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if orientation != Qt.Horizontal or not 0 <= section < len(COLUMNS):
            return None
        if role == Qt.DisplayRole:
            return COLUMNS[section][1]
        if role == Qt.ToolTipRole and section == IMPORTANT_COLUMN:
            return "Important"
        return None

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        key, _, is_flag = COLUMNS[index.column()]
        value = row.get(key)

        if role == Qt.BackgroundRole and row.get("important"):
            return QBrush(IMPORTANT_COLOR)
        if is_flag:
            if role == Qt.CheckStateRole:
                return Qt.Checked if value else Qt.Unchecked
            return None
        if role in (Qt.DisplayRole, Qt.EditRole):
            return value or ""
        return None

    def flags(self, index: QModelIndex):
        if not index.isValid():
            return Qt.NoItemFlags
        base = Qt.ItemIsEnabled | Qt.ItemIsSelectable
        _, _, is_flag = COLUMNS[index.column()]
        if is_flag and (self.editable or index.column() == IMPORTANT_COLUMN):
            return base | Qt.ItemIsUserCheckable
        if not is_flag and self.editable:
            return base | Qt.ItemIsEditable
        return base

    def setData(self, index: QModelIndex, value, role: int = Qt.EditRole) -> bool:
        if not index.isValid():
            return False
        row = self._rows[index.row()]
        key, _, is_flag = COLUMNS[index.column()]

        if is_flag and role == Qt.CheckStateRole:
            row[key] = value == Qt.Checked
        elif not is_flag and role == Qt.EditRole:
            row[key] = str(value).strip()
        else:
            return False

        if index.column() == IMPORTANT_COLUMN and row.get("id"):
            self.important_toggled.emit(int(row["id"]), bool(row[key]))
            first = self.index(index.row(), 0)
            last = self.index(index.row(), len(COLUMNS) - 1)
            self.dataChanged.emit(first, last, [Qt.BackgroundRole])
        else:
            self._dirty.add(index.row())
        self.dataChanged.emit(index, index, [role])
        return True

    # Helpers ----------------------------------------------------------
    def set_rows(self, rows: Sequence[dict[str, Any]]) -> None:
        self.beginResetModel()
        self._rows = [dict(r) for r in rows]
        self._dirty.clear()
        self.endResetModel()

    def append_blank(self) -> int:
        position = len(self._rows)
        self.beginInsertRows(DEFAULT_QMODEL_INDEX, position, position)
        self._rows.append(blank_row())
        self.endInsertRows()
        self._dirty.add(position)
        return position

    def row_at(self, position: int) -> dict[str, Any]:
        return self._rows[position]

    def dirty_rows(self) -> list[int]:
        return sorted(self._dirty)

    def mark_saved(self, position: int, project_id: int) -> None:
        self._rows[position]["id"] = project_id
        self._dirty.discard(position)

    def key_for_column(self, column: int) -> str:
        return COLUMNS[column][0]


class ProjectTableView(QTableView):
    """Table view configured for project rows."""

    def __init__(self, model: ProjectTableModel, parent=None) -> None:
        super().__init__(parent)
        self.setModel(model)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.setAlternatingRowColors(True)
        self.verticalHeader().setVisible(False)
        header = self.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeToContents)
        header.setSectionResizeMode(NAME_COLUMN, QHeaderView.Stretch)
        header.setHighlightSections(False)

    def selected_positions(self) -> list[int]:
        return sorted({index.row() for index in self.selectionModel().selectedRows()})
