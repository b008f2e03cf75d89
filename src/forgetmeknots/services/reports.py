"""Summary figures for the reports view."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from forgetmeknots.core.models import MILESTONE_COLUMNS
from forgetmeknots.storage.project_store import ProjectStore

__all__ = ["MILESTONE_LABELS", "totals", "milestone_summary"]

MILESTONE_LABELS = {
    "fabric_chosen": "Fabric chosen",
    "cut": "Cut",
    "pieced": "Pieced",
    "assembled": "Assembled",
    "back_prepped": "Back prepped",
    "basted": "Basted",
    "quilted": "Quilted",
    "bound": "Bound",
    "photographed": "Photographed",
}


def totals(store: ProjectStore) -> tuple[int, int]:
    """Return ``(open, completed)`` project counts."""

    return store.count_active(), store.count_completed()


def milestone_summary(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """
    Count how many of ``records`` have reached each milestone.

    Returns one row per milestone, in workflow order, with ``milestone``,
    ``label``, ``done``, ``total`` and ``percent`` (0-100, 0.0 when empty).
    """

    frame = pd.DataFrame([dict(rec) for rec in records], columns=list(MILESTONE_COLUMNS))
    flags = frame.fillna(0).astype(bool)
    total = len(flags)
    done = flags.sum()

    summary = pd.DataFrame(
        {
            "milestone": list(MILESTONE_COLUMNS),
            "label": [MILESTONE_LABELS[col] for col in MILESTONE_COLUMNS],
            "done": [int(done[col]) for col in MILESTONE_COLUMNS],
        }
    )
    summary["total"] = total
    summary["percent"] = (summary["done"] / total * 100).round(1) if total else 0.0
    return summary
