# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""JSON backup files: a flat array with one object per project row."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from forgetmeknots.core.errors import ImportFormatError

__all__ = ["DEFAULT_EXPORT_NAME", "FILE_FILTER", "write_backup", "read_backup"]

log = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "projects-backup.json"
FILE_FILTER = "JSON Files (*.json)"


def write_backup(path: str | Path, records: Sequence[Mapping[str, Any]]) -> Path:
    """Write ``records`` to ``path`` as indented JSON and return the path.

    The file is written next to the target and moved over it, so a failed
    write leaves any existing backup intact.
    """

    target = Path(path)
    payload = json.dumps([dict(rec) for rec in records], indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(suffix=".tmp", prefix=f".{target.name}.", dir=target.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.replace(tmp_path, target)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    log.info("Exported %s projects to %s", len(records), target)
    return target


def read_backup(path: str | Path) -> list[dict[str, Any]]:
    """Load a backup file, rejecting anything that is not an array of objects."""

    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ImportFormatError(f"{source.name} is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, list):
        raise ImportFormatError(f"{source.name} does not contain a list of projects.")
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Entry {index + 1} in {source.name} is not an object.")
    return data
