import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PyQt5.QtWidgets")

from PyQt5.QtCore import QSettings, Qt  # noqa: E402
from PyQt5.QtWidgets import QApplication  # noqa: E402

from forgetmeknots.core.models import DEFAULT_SORT, ProjectDraft  # noqa: E402
from forgetmeknots.storage.project_store import open_store  # noqa: E402
from forgetmeknots.ui.main_window import MainWindow  # noqa: E402
from forgetmeknots.ui.project_table import COLUMNS, IMPORTANT_COLUMN, NAME_COLUMN  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def store(qapp, tmp_path):
    QSettings.setPath(QSettings.NativeFormat, QSettings.UserScope, str(tmp_path))
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path))
    store = open_store(":memory:")
    yield store
    store.close()


def _column(key):
    return next(i for i, (name, _, _) in enumerate(COLUMNS) if name == key)


def _add(store, name, **fields):
    return store.save(ProjectDraft(project_name=name, date_started="2024-01-01", **fields))


def test_mark_done_keeps_unsaved_edits(store):
    project_id = _add(store, "Quilt A")
    window = MainWindow(store)
    model = window.active_model

    model.setData(model.index(0, NAME_COLUMN), "Quilt A renamed", Qt.EditRole)
    model.setData(model.index(0, _column("assembled")), Qt.Checked, Qt.CheckStateRole)
    window.active_view.selectRow(0)
    window._archive_selected()

    row = store.get(project_id)
    assert row["project_name"] == "Quilt A renamed"
    assert row["assembled"] == 1
    assert row["archived"] == 1
    assert window.active_model.rowCount() == 0
    window.deleteLater()


def test_delete_keeps_edits_in_other_rows(store):
    first = _add(store, "first")
    second = _add(store, "second")
    window = MainWindow(store)
    model = window.active_model

    model.setData(model.index(1, NAME_COLUMN), "second renamed", Qt.EditRole)
    position = model.append_blank()
    model.setData(model.index(position, _column("dateStarted")), "2024-05-05", Qt.EditRole)
    model.setData(model.index(position, NAME_COLUMN), "brand new", Qt.EditRole)
    window.active_view.selectRow(0)
    window._delete_selected(window.active_view, model)

    assert store.get(first)["deleted"] == 1
    assert store.get(second)["project_name"] == "second renamed"
    names = [row["project_name"] for row in store.list_active()]
    assert names == ["second renamed", "brand new"]
    assert model.dirty_rows() == []
    window.deleteLater()


def test_unsortable_header_click_keeps_sort(store):
    project_id = _add(store, "done", completed_date="2024-02-01")
    store.set_archived(project_id, True)
    window = MainWindow(store)

    window._change_sort("archived", window.archived_model, IMPORTANT_COLUMN)

    assert window._sort["archived"] == DEFAULT_SORT
    header = window.archived_view.horizontalHeader()
    assert header.sortIndicatorSection() == _column("completedDate")
    assert header.sortIndicatorOrder() == Qt.DescendingOrder
    window.deleteLater()


def test_sort_arrow_follows_the_applied_sort(store):
    window = MainWindow(store)
    window._sort["deleted"] = ("important", "ASC")

    window.refresh_all()

    header = window.deleted_view.horizontalHeader()
    assert header.sortIndicatorSection() == _column("completedDate")
    assert header.sortIndicatorOrder() == Qt.DescendingOrder
    window.deleteLater()
