"""Reports window: project totals, a date-range count and milestone progress."""

from __future__ import annotations

from PyQt5.QtCore import QDate, Qt
from PyQt5.QtWidgets import (
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from forgetmeknots.services.router import RequestRouter

DATE_FORMAT = "yyyy-MM-dd"


class ReportsDialog(QDialog):
    def __init__(self, router: RequestRouter, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Reports")
        self.resize(600, 600)
        self.router = router
        self._build_ui()
        self.load_totals()
        self.load_milestones()

    # ------------------------------------------------------------------#
    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        totals_box = QGroupBox("All time", self)
        totals_form = QFormLayout(totals_box)
        self.total_open_label = QLabel("–", totals_box)
        self.total_completed_label = QLabel("–", totals_box)
        totals_form.addRow("Open projects:", self.total_open_label)
        totals_form.addRow("Completed projects:", self.total_completed_label)
        layout.addWidget(totals_box)

        range_box = QGroupBox("Date range", self)
        range_layout = QVBoxLayout(range_box)
        pickers = QHBoxLayout()
        today = QDate.currentDate()
        self.start_edit = QDateEdit(QDate(today.year(), 1, 1), range_box)
        self.end_edit = QDateEdit(today, range_box)
        for edit in (self.start_edit, self.end_edit):
            edit.setCalendarPopup(True)
            edit.setDisplayFormat(DATE_FORMAT)
        run_button = QPushButton("Get Report", range_box)
        run_button.clicked.connect(self.load_range)
        pickers.addWidget(QLabel("From", range_box))
        pickers.addWidget(self.start_edit)
        pickers.addWidget(QLabel("to", range_box))
        pickers.addWidget(self.end_edit)
        pickers.addWidget(run_button)
        range_layout.addLayout(pickers)
        range_form = QFormLayout()
        self.range_open_label = QLabel("–", range_box)
        self.range_completed_label = QLabel("–", range_box)
        range_form.addRow("Started in range:", self.range_open_label)
        range_form.addRow("Completed in range:", self.range_completed_label)
        range_layout.addLayout(range_form)
        layout.addWidget(range_box)

        milestones_box = QGroupBox("Open project progress", self)
        milestones_layout = QVBoxLayout(milestones_box)
        self.milestone_table = QTableWidget(0, 3, milestones_box)
        self.milestone_table.setHorizontalHeaderLabels(["Milestone", "Done", "%"])
        self.milestone_table.verticalHeader().setVisible(False)
        self.milestone_table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.milestone_table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        milestones_layout.addWidget(self.milestone_table)
        layout.addWidget(milestones_box, stretch=1)

        buttons = QDialogButtonBox(QDialogButtonBox.Close, Qt.Horizontal, self)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    # ------------------------------------------------------------------#
    def load_totals(self) -> None:
        open_resp = self.router.get_total_open_projects()
        completed_resp = self.router.get_total_completed_projects()
        self.total_open_label.setText(
            str(open_resp["total"]) if open_resp.get("success") else "Error"
        )
        self.total_completed_label.setText(
            str(completed_resp["total"]) if completed_resp.get("success") else "Error"
        )

    def load_range(self) -> None:
        response = self.router.get_projects_by_date_range(
            {
                "startDate": self.start_edit.date().toString(DATE_FORMAT),
                "endDate": self.end_edit.date().toString(DATE_FORMAT),
            }
        )
        if not response.get("success"):
            self.range_open_label.setText("Error")
            self.range_completed_label.setText("Error")
            QMessageBox.warning(self, "Reports", response.get("error", "Error fetching report."))
            return
        self.range_open_label.setText(str(response["openProjects"]))
        self.range_completed_label.setText(str(response["completedProjects"]))

    def load_milestones(self) -> None:
        response = self.router.get_milestone_summary()
        rows = response.get("milestones", []) if response.get("success") else []
        self.milestone_table.setRowCount(len(rows))
        for position, item in enumerate(rows):
            self.milestone_table.setItem(position, 0, QTableWidgetItem(item["label"]))
            self.milestone_table.setItem(
                position, 1, QTableWidgetItem(f"{item['done']} / {item['total']}")
            )
            self.milestone_table.setItem(position, 2, QTableWidgetItem(f"{item['percent']:.1f}"))
