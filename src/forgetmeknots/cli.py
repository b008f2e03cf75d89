"""Headless command line access to the request router.

Examples::

    fmk call getActiveRows
    fmk call saveRow '{"dateStarted": "2024-01-01", "projectName": "Quilt A"}'
    fmk export ~/projects-backup.json
    fmk totals --start 2024-01-01 --end 2024-12-31
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from forgetmeknots.app.config import database_path, ensure_database
from forgetmeknots.services.router import OPERATIONS, RequestRouter
from forgetmeknots.storage.project_store import open_store


def _print(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _succeeded(result: object) -> bool:
    if isinstance(result, dict):
        return bool(result.get("success"))
    return True


def cmd_call(router: RequestRouter, args: argparse.Namespace) -> int:
    payload = None
    if args.payload:
        try:
            payload = json.loads(args.payload)
        except json.JSONDecodeError as exc:
            print(f"Payload is not valid JSON: {exc.msg}", file=sys.stderr)
            return 2
    result = router.dispatch(args.operation, payload)
    _print(result)
    return 0 if _succeeded(result) else 1


def cmd_export(router: RequestRouter, args: argparse.Namespace) -> int:
    result = router.export_data({"filePath": str(args.path)})
    _print(result)
    return 0 if _succeeded(result) else 1


def cmd_import(router: RequestRouter, args: argparse.Namespace) -> int:
    result = router.import_data({"filePath": str(args.path)})
    _print(result)
    return 0 if _succeeded(result) else 1


def cmd_totals(router: RequestRouter, args: argparse.Namespace) -> int:
    summary: dict[str, object] = {
        "open": router.get_total_open_projects(),
        "completed": router.get_total_completed_projects(),
    }
    if args.start or args.end:
        summary["range"] = router.get_projects_by_date_range(
            {"startDate": args.start, "endDate": args.end}
        )
    _print(summary)
    return 0 if all(_succeeded(value) for value in summary.values()) else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("fmk", description="Forget-Me-Knots project tracker")
    parser.add_argument("--db", type=Path, default=None, help="database file (default: user data dir)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log to stderr at DEBUG")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("call", help="invoke one router operation")
    sp.add_argument("operation", choices=OPERATIONS)
    sp.add_argument("payload", nargs="?", default=None, help="JSON object argument")
    sp.set_defaults(func=cmd_call)

    sp = sub.add_parser("export", help="write every project to a JSON backup")
    sp.add_argument("path", type=Path)
    sp.set_defaults(func=cmd_export)

    sp = sub.add_parser("import", help="load projects from a JSON backup")
    sp.add_argument("path", type=Path)
    sp.set_defaults(func=cmd_import)

    sp = sub.add_parser("totals", help="open/completed project counts")
    sp.add_argument("--start", default=None, help="range start (YYYY-MM-DD)")
    sp.add_argument("--end", default=None, help="range end (YYYY-MM-DD)")
    sp.set_defaults(func=cmd_totals)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)-8s | %(name)s | %(message)s",
    )

    db_path = args.db if args.db is not None else ensure_database(database_path())
    with open_store(db_path) as store:
        return args.func(RequestRouter(store), args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
