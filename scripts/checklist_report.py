#!/usr/bin/env python3
"""List the checklists an account may see, with non-conformance counts.

Reads a fleetcheck data directory (``FLEETCHECK_DATA_DIR`` or ``--data-dir``),
seeds the admin account on first run, signs in as ``--email`` and prints one
line per visible checklist, newest first.

Examples::

    python scripts/checklist_report.py --data-dir ./data --email admin@example.com
    python scripts/checklist_report.py --data-dir ./data --email ana@x.com --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetcheck import (  # noqa: E402
    AccountNotFoundError,
    ChecklistStore,
    FleetCheckConfig,
    SessionManager,
    build_backend,
    build_secure_backend,
    record_summary,
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--data-dir", type=Path, default=None, help="fleetcheck data directory")
    parser.add_argument("--email", required=True, help="account to sign in as")
    parser.add_argument("--json", action="store_true", help="emit JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    config = FleetCheckConfig.from_env(**overrides)
    if config.data_dir is None:
        print("No data directory (set FLEETCHECK_DATA_DIR or pass --data-dir)", file=sys.stderr)
        return 2

    backend = build_backend(config)
    manager = SessionManager(build_secure_backend(config, backend), config)
    store = ChecklistStore(backend, config)

    await manager.bootstrap()
    try:
        await manager.login(args.email, "")
    except AccountNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    records = await store.list_visible(manager.current_session)
    rows: list[dict[str, Any]] = []
    for record in records:
        summary = record_summary(record)
        rows.append(
            {
                "id": record.id,
                "plate": record.plate,
                "driver": record.driver,
                "date": record.date,
                "time": record.time,
                "inspected": summary.inspected_count,
                "total": summary.total_items,
                "notOk": summary.not_ok_count,
            }
        )

    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
    else:
        print(f"{len(rows)} checklist{'s' if len(rows) != 1 else ''}")
        for row in rows:
            verdict = f"{row['notOk']} non-conforming" if row["notOk"] else "all OK"
            print(
                f"  {row['date']} {row['time']}  {row['plate'] or '-':<10} {row['driver'] or '-':<20} "
                f"{row['inspected']}/{row['total']} inspected, {verdict}"
            )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
