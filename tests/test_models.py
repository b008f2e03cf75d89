import pytest

from forgetmeknots.core.errors import ProjectValidationError
from forgetmeknots.core.models import (
    ALL_COLUMNS,
    DateRangeRequest,
    ProjectDraft,
    ProjectRecord,
    SortRequest,
    column_for,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("completedDate", "completed_date"),
        ("completed_date", "completed_date"),
        ("backPrepped", "back_prepped"),
        ("id", "id"),
        ("CompletedDate", None),
        ("", None),
    ],
)
def test_column_for(name, expected):
    assert column_for(name) == expected


def test_draft_accepts_wire_names_and_trims():
    draft = ProjectDraft.model_validate(
        {
            "id": "",
            "dateStarted": " 2024-01-01 ",
            "completedDate": "   ",
            "projectName": "  Log Cabin ",
            "fabricChosen": 1,
            "unknownField": "ignored",
        }
    )

    assert draft.id is None
    assert draft.date_started == "2024-01-01"
    assert draft.completed_date is None
    assert draft.project_name == "Log Cabin"
    assert draft.fabric_chosen is True
    draft.require_complete()


def test_draft_column_values_store_flags_as_integers():
    values = ProjectDraft(project_name="x", date_started="2024-01-01", cut=True).column_values()

    assert "id" not in values
    assert values["cut"] == 1
    assert values["pieced"] == 0
    assert set(values) <= set(ALL_COLUMNS)


def test_record_to_wire_uses_camel_case():
    record = ProjectRecord.model_validate(
        {"id": 3, "date_started": "2024-01-01", "project_name": "x", "archived": 1}
    )

    wire = record.to_wire()
    assert wire["dateStarted"] == "2024-01-01"
    assert wire["projectName"] == "x"
    assert wire["archived"] is True
    assert wire["position"] == 0


def test_sort_request_never_rejects():
    request = SortRequest.model_validate({"sortBy": None, "sortOrder": 5})

    assert request.sort_by == ""
    assert request.sort_order == "5"
    assert SortRequest().sort_by == "completed_date"


def test_date_range_requires_both_ends():
    with pytest.raises(ProjectValidationError, match="both start and end"):
        DateRangeRequest.model_validate({"startDate": "2024-01-01", "endDate": None}).require_complete()
