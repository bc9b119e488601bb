#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from jsonschema import Draft7Validator

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rawdb.codec import DecodeError, parse_all
from rawdb_contracts.models import SCHEMA_NAMES, load_schema


def validate_schema_definitions() -> None:
    for contract_name in SCHEMA_NAMES:
        Draft7Validator.check_schema(load_schema(contract_name))


def collect_problems(path: Path) -> tuple[int, list[str]]:
    rows = parse_all(path.read_text(encoding="utf-8"))
    validator = Draft7Validator(schema=load_schema("RECORD"))

    problems: list[str] = []
    seen: dict[int, int] = {}
    for position, row in enumerate(rows, start=1):
        for error in sorted(validator.iter_errors(row), key=lambda err: list(err.path)):
            problems.append(f"row {position}: {error.message}")
        record_id = row.get("id")
        if not isinstance(record_id, int) or isinstance(record_id, bool):
            continue
        if record_id in seen:
            problems.append(f"row {position}: duplicate id {record_id} (first seen at row {seen[record_id]})")
        else:
            seen[record_id] = position
    return len(rows), problems


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a JSONL collection file")
    parser.add_argument("--file", type=Path, help="Collection file to check")
    parser.add_argument(
        "--validate-schemas-only",
        action="store_true",
        help="Validate the bundled JSON Schema files only",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    validate_schema_definitions()
    if args.validate_schemas_only:
        print("OK: all schemas are valid draft-07 schemas")
        return 0

    if not args.file:
        print("ERROR: --file is required unless --validate-schemas-only is used")
        return 2

    try:
        count, problems = collect_problems(args.file)
    except DecodeError as exc:
        print(f"DECODE ERROR: {exc}")
        return 1

    if problems:
        for problem in problems:
            print(f"INVALID: {problem}")
        return 1

    print(f"OK: {count} rows in {args.file} have unique non-negative integer ids")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
