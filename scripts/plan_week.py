"""Generate next-week suggestions from a CSV/JSON task history."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from planner_engine.adapters import csv_adapter, json_adapter
from planner_engine.config import load_settings
from planner_engine.logging_setup import setup_logging
from planner_engine.suggestions import generate_suggestions


def _load_tasks(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Suggest tasks for the coming week")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON task history")
    parser.add_argument("--config", help="Optional YAML/JSON settings file")
    parser.add_argument("--now", help="Reference time (ISO-8601), defaults to the current time")
    parser.add_argument("--verbose", action="store_true", help="Log rule decisions")
    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    settings = load_settings(args.config)
    tasks = _load_tasks(Path(args.data))
    now = datetime.fromisoformat(args.now) if args.now else datetime.now()

    suggestions = generate_suggestions(tasks, clock=lambda: now, settings=settings)
    payload = [asdict(s) for s in suggestions]
    print(json.dumps(payload, indent=2, default=str, ensure_ascii=False))


if __name__ == "__main__":
    main()
