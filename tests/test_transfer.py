import json

import pytest

from forgetmeknots.core.errors import ImportFormatError
from forgetmeknots.services.router import RequestRouter
from forgetmeknots.services.transfer import read_backup, write_backup
from forgetmeknots.storage.project_store import open_store


class _Picker:
    def __init__(self, export_path=None, import_path=None):
        self.export_path = export_path
        self.import_path = import_path
        self.default_names = []

    def choose_export_path(self, default_name):
        self.default_names.append(default_name)
        return self.export_path

    def choose_import_path(self):
        return self.import_path


def _router(**kwargs):
    return RequestRouter(open_store(":memory:"), **kwargs)


def _seed(router):
    first = router.save_row(
        {"dateStarted": "2024-01-01", "projectName": "Log Cabin", "cut": True}
    )["id"]
    second = router.save_row({"dateStarted": "2024-02-01", "projectName": "Star"})["id"]
    router.archive_row({"id": second, "isArchived": True})
    router.mark_important({"id": first, "isImportant": True})
    return first, second


def test_write_backup_round_trips_records(tmp_path):
    path = write_backup(tmp_path / "out.json", [{"id": 1, "project_name": "Quilt"}])

    assert read_backup(path) == [{"id": 1, "project_name": "Quilt"}]
    assert path.read_text(encoding="utf-8").startswith("[\n  {")


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("{not json", "not valid JSON"),
        ('{"id": 1}', "does not contain a list"),
        ('[{"id": 1}, 7]', "Entry 2"),
    ],
)
def test_read_backup_rejects_malformed_files(tmp_path, content, message):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ImportFormatError, match=message):
        read_backup(path)


def test_export_writes_snake_case_columns(tmp_path):
    router = _router()
    first, second = _seed(router)
    target = tmp_path / "backup.json"

    response = router.dispatch("exportData", {"filePath": str(target)})

    assert response == {
        "success": True,
        "message": "Data exported successfully!",
        "filePath": str(target),
    }
    data = json.loads(target.read_text(encoding="utf-8"))
    assert [item["id"] for item in data] == [first, second]
    assert data[0]["project_name"] == "Log Cabin"
    assert data[0]["cut"] == 1
    assert data[0]["important"] == 1
    assert data[1]["archived"] == 1
    assert "position" in data[0]


def test_export_then_import_into_empty_store(tmp_path):
    source = _router()
    first, second = _seed(source)
    target = tmp_path / "backup.json"
    source.export_data({"filePath": str(target)})

    restored = _router()
    response = restored.import_data({"filePath": str(target)})

    assert response == {
        "success": True,
        "message": "Data imported successfully!",
        "imported": 2,
    }
    assert restored.get_active_rows() == source.get_active_rows()
    assert restored.get_archived_rows() == source.get_archived_rows()


def test_export_uses_picker_and_default_name(tmp_path):
    target = tmp_path / "picked.json"
    picker = _Picker(export_path=str(target))
    router = _router(file_picker=picker)
    _seed(router)

    response = router.export_data()

    assert response["success"] is True
    assert picker.default_names == ["projects-backup.json"]
    assert target.exists()


@pytest.mark.parametrize(
    ("operation", "message"),
    [("exportData", "Export canceled."), ("importData", "Import canceled.")],
)
def test_cancelled_picker_is_not_an_error(operation, message):
    router = _router(file_picker=_Picker())

    response = router.dispatch(operation)

    assert response == {"success": False, "canceled": True, "message": message}
    assert "error" not in response
    assert router.get_active_rows() == []


@pytest.mark.parametrize(
    ("operation", "message"),
    [
        ("exportData", "No export location was given."),
        ("importData", "No file to import was given."),
    ],
)
def test_missing_path_without_picker_fails(operation, message):
    assert _router().dispatch(operation) == {"success": False, "error": message}


def test_import_of_malformed_file_inserts_nothing(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{\"id\": 1, ", encoding="utf-8")
    router = _router(file_picker=_Picker(import_path=str(path)))

    response = router.import_data()

    assert response["success"] is False
    assert "not valid JSON" in response["error"]
    assert router.get_active_rows() == []


def test_import_with_bad_record_rolls_back_batch(tmp_path):
    path = tmp_path / "partial.json"
    records = [
        {"id": 1, "date_started": "2024-01-01", "project_name": "fine"},
        {"id": 2, "date_started": "2024-01-02", "project_name": ""},
    ]
    path.write_text(json.dumps(records), encoding="utf-8")
    router = _router()

    response = router.import_data({"filePath": str(path)})

    assert response["success"] is False
    assert "Record 2" in response["error"]
    assert router.get_active_rows() == []


def test_import_with_duplicate_id_fails_and_keeps_existing_rows(tmp_path):
    router = _router()
    existing = router.save_row({"dateStarted": "2024-01-01", "projectName": "Keep"})["id"]
    path = tmp_path / "dupe.json"
    path.write_text(
        json.dumps(
            [
                {"id": 50, "date_started": "2024-01-01", "project_name": "new"},
                {"id": existing, "date_started": "2024-01-01", "project_name": "clash"},
            ]
        ),
        encoding="utf-8",
    )

    response = router.import_data({"filePath": str(path)})

    assert response["success"] is False
    assert response["error"]
    assert [row["projectName"] for row in router.get_active_rows()] == ["Keep"]


def test_import_of_missing_file_fails(tmp_path):
    response = _router().import_data({"filePath": str(tmp_path / "nope.json")})

    assert response["success"] is False
    assert response["error"]


@pytest.mark.parametrize("operation", ["exportData", "importData"])
def test_empty_file_path_is_rejected(operation):
    router = _router(file_picker=_Picker(export_path="unused.json", import_path="unused.json"))

    response = router.dispatch(operation, {"filePath": "  "})

    assert response == {"success": False, "error": "File path must not be empty."}


def test_failed_write_keeps_previous_backup(tmp_path, monkeypatch):
    target = tmp_path / "backup.json"
    write_backup(target, [{"id": 1, "project_name": "old"}])

    def fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("forgetmeknots.services.transfer.os.replace", fail)
    with pytest.raises(OSError, match="disk full"):
        write_backup(target, [{"id": 2, "project_name": "new"}])

    assert read_backup(target) == [{"id": 1, "project_name": "old"}]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["backup.json"]
