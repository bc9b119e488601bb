from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from rawdb.codec import DecodeError, dumps_record
from rawdb.collection import CollectionStore
from rawdb.config import load_config


def _render(record: dict[str, Any], *, pretty: bool) -> str:
    if pretty:
        return json.dumps(record, ensure_ascii=False, indent=2)
    return dumps_record(record)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CLI for JSONL collections")
    parser.add_argument("--data-dir", default=None, help="Base directory for collection files (default: ./data)")
    parser.add_argument("--ext", default=None, help="Collection file extension (default: .jsonl)")
    parser.add_argument("--config", default=None, help="Optional YAML file with base_dir / file_extension")
    parser.add_argument("--verbose", action="store_true", default=False)

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add a new row (accepts string or JSON)")
    add.add_argument("file")
    add.add_argument("data")

    get = subparsers.add_parser("get", help="List rows with pagination")
    get.add_argument("file")
    get.add_argument("page", type=int)
    get.add_argument("-q", "--quantity", type=int, default=10, help="Rows per page")
    get.add_argument("-a", "--asc", action="store_true", default=False, help="Ascending order")
    get.add_argument("-p", "--pretty", action="store_true", default=False)

    get_index = subparsers.add_parser("getIndex", aliases=["get-index"], help="Get a row by index")
    get_index.add_argument("file")
    get_index.add_argument("index", type=int)
    get_index.add_argument("-p", "--pretty", action="store_true", default=False)

    get_by_id = subparsers.add_parser("getById", aliases=["get-by-id"], help="Get a row by ID")
    get_by_id.add_argument("file")
    get_by_id.add_argument("id", type=int)
    get_by_id.add_argument("-p", "--pretty", action="store_true", default=False)

    exists = subparsers.add_parser("exists", help="Check if a row contains a term")
    exists.add_argument("file")
    exists.add_argument("term")

    delete_by_term = subparsers.add_parser("deleteByTerm", aliases=["delete-by-term"], help="Delete rows containing a term")
    delete_by_term.add_argument("file")
    delete_by_term.add_argument("term")

    delete_by_index = subparsers.add_parser("deleteByIndex", aliases=["delete-by-index"], help="Delete a row by index")
    delete_by_index.add_argument("file")
    delete_by_index.add_argument("index", type=int)

    delete_by_id = subparsers.add_parser("deleteById", aliases=["delete-by-id"], help="Delete a row by ID")
    delete_by_id.add_argument("file")
    delete_by_id.add_argument("id", type=int)

    upgrade_by_index = subparsers.add_parser("upgradeByIndex", aliases=["upgrade-by-index"], help="Update a row by index (accepts JSON)")
    upgrade_by_index.add_argument("file")
    upgrade_by_index.add_argument("index", type=int)
    upgrade_by_index.add_argument("new_data")

    upgrade_by_term = subparsers.add_parser("upgradeByTerm", aliases=["upgrade-by-term"], help="Update a row containing a term (accepts JSON)")
    upgrade_by_term.add_argument("file")
    upgrade_by_term.add_argument("term")
    upgrade_by_term.add_argument("new_data")

    upgrade_by_id = subparsers.add_parser("upgradeById", aliases=["upgrade-by-id"], help="Update a row by ID (accepts JSON)")
    upgrade_by_id.add_argument("file")
    upgrade_by_id.add_argument("id", type=int)
    upgrade_by_id.add_argument("new_data")

    return parser


_ALIASES = {
    "get-index": "getIndex",
    "get-by-id": "getById",
    "delete-by-term": "deleteByTerm",
    "delete-by-index": "deleteByIndex",
    "delete-by-id": "deleteById",
    "upgrade-by-index": "upgradeByIndex",
    "upgrade-by-term": "upgradeByTerm",
    "upgrade-by-id": "upgradeById",
}


def _report(ok: bool, success: str, failure: str) -> int:
    print(success if ok else failure)
    return 0 if ok else 1


def _show(row: dict[str, Any] | None, *, pretty: bool) -> int:
    if row is None:
        print("No row found.")
        return 1
    print(_render(row, pretty=pretty))
    return 0


def _dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace, store: CollectionStore) -> int:
    command = _ALIASES.get(args.command, args.command)

    if command == "add":
        record = store.create(args.data)
        print("Row added!")
        print(dumps_record(record))
        return 0

    if command == "get":
        page = store.paginate(quantity=args.quantity, ascending=args.asc, page=args.page)
        print(f"Total rows: {page.total}")
        for position, row in enumerate(page.rows, start=1):
            print(_render(row, pretty=True) if args.pretty else f"{position}. {dumps_record(row)}")
        return 0

    if command == "getIndex":
        return _show(store.get_by_index(args.index), pretty=args.pretty)

    if command == "getById":
        return _show(store.get_by_id(args.id), pretty=args.pretty)

    if command == "exists":
        row = store.find_by_term(args.term)
        if row is None:
            print(f'No row contains "{args.term}"')
            return 1
        print(f"Found: {dumps_record(row)}")
        return 0

    if command == "deleteByTerm":
        return _report(store.delete_by_term(args.term), "Rows deleted.", "No matching rows found.")

    if command == "deleteByIndex":
        return _report(store.delete_by_index(args.index), "Row deleted.", "Invalid index.")

    if command == "deleteById":
        return _report(store.delete_by_id(args.id), "Row deleted.", "No row with that ID.")

    if command == "upgradeByIndex":
        return _report(store.update_by_index(args.index, args.new_data), "Row updated!", "Failed to update.")

    if command == "upgradeByTerm":
        return _report(store.update_by_term(args.term, args.new_data), "Row updated!", "No matching row found.")

    if command == "upgradeById":
        return _report(store.update_by_id(args.id, args.new_data), "Row updated!", "No row with that ID.")

    parser.error("Unknown command")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    config = load_config(args.config, base_dir=args.data_dir, file_extension=args.ext)
    store = CollectionStore(args.file, config)

    try:
        return _dispatch(parser, args, store)
    except DecodeError as exc:
        print(f"ERROR: {store.paths.file_path}: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
