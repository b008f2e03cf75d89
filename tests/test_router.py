import pytest

from forgetmeknots.services.router import OPERATIONS, RequestRouter
from forgetmeknots.storage.project_store import open_store


class _Host:
    def __init__(self):
        self.shown = []

    def show_reports(self):
        self.shown.append("reports")

    def show_settings(self):
        self.shown.append("settings")


def _router(**kwargs):
    return RequestRouter(open_store(":memory:"), **kwargs)


def _save(router, name="Quilt A", started="2024-01-01", **fields):
    response = router.save_row({"dateStarted": started, "projectName": name, **fields})
    assert response["success"], response
    return response["id"]


def _ids(rows):
    return [row["id"] for row in rows]


def test_dispatch_table_covers_every_operation():
    router = _router()
    assert set(router.operations) == set(OPERATIONS)


def test_unknown_operation_reports_error():
    response = _router().dispatch("dropEverything")
    assert response == {"success": False, "error": "Unknown operation: dropEverything"}


def test_save_then_list_active_scenario():
    router = _router()

    response = router.dispatch("saveRow", {"dateStarted": "2024-01-01", "projectName": "Quilt A"})
    assert response == {"success": True, "id": 1}

    rows = router.dispatch("getActiveRows")
    assert len(rows) == 1
    record = rows[0]
    assert record["id"] == 1
    assert record["projectName"] == "Quilt A"
    assert record["dateStarted"] == "2024-01-01"
    assert record["archived"] is False
    assert record["deleted"] is False
    assert record["important"] is False
    assert record["completedDate"] is None


def test_archive_scenario():
    router = _router()
    project_id = _save(router)

    assert router.dispatch("archiveRow", {"id": project_id, "isArchived": True}) == {
        "success": True
    }

    assert router.dispatch("getActiveRows") == []
    archived = router.dispatch(
        "getArchivedRows", {"sortBy": "completedDate", "sortOrder": "DESC"}
    )
    assert _ids(archived) == [project_id]


def test_delete_and_restore_archived_scenario():
    router = _router()
    project_id = _save(router)
    router.archive_row({"id": project_id, "isArchived": True})

    assert router.dispatch("deleteRow", {"id": project_id}) == {"success": True}
    deleted = router.dispatch("getDeletedRows")
    assert _ids(deleted) == [project_id]
    assert deleted[0]["archived"] is True
    assert router.get_archived_rows() == []

    response = router.dispatch("restoreDeletedRow", {"id": project_id})
    assert response == {"success": True, "archived": True}
    assert router.get_deleted_rows() == []
    assert _ids(router.get_archived_rows()) == [project_id]
    assert router.get_active_rows() == []


def test_restore_active_project_reports_not_archived():
    router = _router()
    project_id = _save(router)
    router.delete_row({"id": project_id})

    assert router.restore_deleted_row({"id": project_id}) == {"success": True, "archived": False}
    assert _ids(router.get_active_rows()) == [project_id]


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"dateStarted": "2024-01-01", "projectName": ""}, "Project name is required."),
        ({"dateStarted": "2024-01-01"}, "Project name is required."),
        ({"projectName": "Quilt"}, "Start date is required."),
        ({"dateStarted": "   ", "projectName": "Quilt"}, "Start date is required."),
        ({"dateStarted": None, "projectName": None}, "Start date is required."),
    ],
)
def test_save_validation_errors(payload, message):
    router = _router()

    assert router.save_row(payload) == {"success": False, "error": message}
    assert router.get_active_rows() == []


def test_save_update_keeps_row_count_and_overwrites_fields():
    router = _router()
    project_id = _save(router, cut=True)

    response = router.save_row(
        {
            "id": project_id,
            "dateStarted": "2024-02-02",
            "completedDate": "2024-03-03",
            "projectName": "Quilt A v2",
            "quilted": 1,
            "important": 1,
        }
    )

    assert response == {"success": True, "id": project_id}
    (record,) = router.get_active_rows()
    assert record["projectName"] == "Quilt A v2"
    assert record["cut"] is False
    assert record["quilted"] is True
    assert record["important"] is True
    assert record["completedDate"] == "2024-03-03"


def test_save_with_zero_id_inserts():
    router = _router()
    assert router.save_row({"id": 0, "dateStarted": "2024-01-01", "projectName": "x"})["id"] == 1


def test_save_rejects_bad_id_and_unknown_target():
    router = _router()

    bad = router.save_row({"id": "abc", "dateStarted": "2024-01-01", "projectName": "x"})
    assert bad["success"] is False
    assert "id" in bad["error"]

    missing = router.save_row({"id": 99, "dateStarted": "2024-01-01", "projectName": "x"})
    assert missing == {"success": False, "error": "Project 99 does not exist."}


def test_non_object_payload_is_rejected():
    response = _router().save_row("Quilt A")
    assert response == {"success": False, "error": "Request payload must be an object."}


@pytest.mark.parametrize(
    ("operation", "payload"),
    [
        ("archiveRow", {"id": 1}),
        ("archiveRow", {"isArchived": True}),
        ("deleteRow", {"id": 0}),
        ("deleteRow", None),
        ("markImportant", {"id": -3, "isImportant": True}),
        ("purgeDeletedRow", {"id": "one"}),
    ],
)
def test_row_operations_validate_input(operation, payload):
    router = _router()
    _save(router)

    response = router.dispatch(operation, payload)

    assert response["success"] is False
    assert response["error"]
    (record,) = router.get_active_rows()
    assert record["archived"] is False
    assert record["deleted"] is False


def test_invalid_sort_behaves_like_default():
    router = _router()
    for name, done in [("B", "2024-02-01"), ("A", "2024-09-01"), ("C", "2024-05-01")]:
        project_id = _save(router, name, completedDate=done)
        router.archive_row({"id": project_id, "isArchived": True})

    default = router.get_archived_rows({"sortBy": "completedDate", "sortOrder": "DESC"})
    assert [row["projectName"] for row in default] == ["A", "C", "B"]
    assert router.get_archived_rows({"sortBy": "nope", "sortOrder": "ASC"}) == default
    assert router.get_archived_rows({"sortBy": "projectName", "sortOrder": "?"}) == default
    assert router.get_archived_rows() == default

    by_name = router.get_archived_rows({"sortBy": "projectName", "sortOrder": "ASC"})
    assert [row["projectName"] for row in by_name] == ["A", "B", "C"]


def test_purge_single_and_repeat():
    router = _router()
    project_id = _save(router)
    router.delete_row({"id": project_id})

    assert router.purge_deleted_row({"id": project_id}) == {"success": True}
    assert router.purge_deleted_row({"id": project_id}) == {"success": True}
    assert router.get_deleted_rows() == []
    assert router.get_active_rows() == []


def test_purge_all_deleted_keeps_live_rows():
    router = _router()
    keep = _save(router, "keep")
    for name in ("a", "b"):
        router.delete_row({"id": _save(router, name)})

    assert router.dispatch("purgeDeletedRows") == {"success": True}
    assert router.get_deleted_rows() == []
    assert _ids(router.get_active_rows()) == [keep]


def test_mark_important():
    router = _router()
    project_id = _save(router)

    assert router.mark_important({"id": project_id, "isImportant": True}) == {"success": True}
    assert router.get_active_rows()[0]["important"] is True


def test_totals_and_date_range():
    router = _router()
    _save(router, "open", "2024-03-01")
    done = _save(router, "done", "2023-01-01", completedDate="2024-04-01")
    router.archive_row({"id": done, "isArchived": True})

    assert router.get_total_open_projects() == {"success": True, "total": 1}
    assert router.get_total_completed_projects() == {"success": True, "total": 1}
    assert router.get_projects_by_date_range(
        {"startDate": "2024-01-01", "endDate": "2024-12-31"}
    ) == {"success": True, "openProjects": 1, "completedProjects": 1}


def test_date_range_requires_both_dates():
    response = _router().get_projects_by_date_range({"startDate": "2024-01-01"})
    assert response == {"success": False, "error": "Please select both start and end dates."}


def test_milestone_summary():
    router = _router()
    _save(router, "one", cut=True, pieced=True)
    _save(router, "two", cut=True)

    response = router.get_milestone_summary()

    assert response["success"] is True
    by_key = {item["milestone"]: item for item in response["milestones"]}
    assert len(by_key) == 9
    assert by_key["cut"] == {
        "milestone": "cut",
        "label": "Cut",
        "done": 2,
        "total": 2,
        "percent": 100.0,
    }
    assert by_key["pieced"]["percent"] == 50.0
    assert by_key["bound"]["done"] == 0


def test_host_signals():
    host = _Host()
    router = _router(host=host)

    assert router.dispatch("openReports") == {"success": True}
    assert router.dispatch("openSettings") == {"success": True}
    assert host.shown == ["reports", "settings"]


def test_host_signals_without_host_are_noops():
    router = _router()
    assert router.open_reports() == {"success": True}
    assert router.open_settings() == {"success": True}


def test_storage_failures_are_reported_not_raised():
    router = _router()
    _save(router)
    router.store.close()

    assert router.get_active_rows() == []
    assert router.get_archived_rows({"sortBy": "projectName", "sortOrder": "ASC"}) == []
    assert router.get_deleted_rows() == []

    for operation, payload in [
        ("saveRow", {"dateStarted": "2024-01-01", "projectName": "x"}),
        ("deleteRow", {"id": 1}),
        ("getTotalOpenProjects", None),
        ("purgeDeletedRows", None),
    ]:
        response = router.dispatch(operation, payload)
        assert response["success"] is False
        assert response["error"]
