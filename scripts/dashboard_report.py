"""Print the dashboard panels for a JSON snapshot export."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from college_tracker.adapters import csv_adapter, json_adapter
from college_tracker.config import configure_logging, load_settings
from college_tracker.dashboard import build_dashboard, resolve_clock
from college_tracker.dates import parse_iso_date, start_of_month


def main() -> None:
    parser = argparse.ArgumentParser(description="Render college-tracker dashboard data as JSON")
    parser.add_argument("--data", help="Path to JSON snapshot (defaults to TRACKER_DATA_FILE)")
    parser.add_argument("--tasks-csv", help="Replace the snapshot tasks with a flat task CSV export")
    parser.add_argument("--month", help="Calendar month to show, YYYY-MM-DD of any day in it")
    parser.add_argument("--mode", choices=["month", "upcoming"], default="month")
    parser.add_argument("--day", help="Selected agenda day, YYYY-MM-DD")
    parser.add_argument("--today", help="Override today's date, YYYY-MM-DD")
    parser.add_argument("--out", help="Also write the report to this path")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(settings.log_level)
    tz = settings.tzinfo

    snapshot = json_adapter.parse(args.data or str(settings.data_file))
    if args.tasks_csv:
        snapshot = replace(snapshot, tasks=tuple(csv_adapter.parse_tasks(args.tasks_csv)))
    today, now = resolve_clock(parse_iso_date(args.today) if args.today else None, tz=tz)
    anchor = start_of_month(parse_iso_date(args.month)) if args.month else start_of_month(today)

    report = build_dashboard(snapshot, anchor, mode=args.mode, selected=args.day, today=today, now=now, tz=tz)
    text = json.dumps(report, indent=2, ensure_ascii=False)
    print(text)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        print(f"Saved dashboard report to {out_path}")


if __name__ == "__main__":
    main()
