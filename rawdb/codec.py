from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

Record = dict[str, Any]


class DecodeError(ValueError):
    """A stored line could not be decoded into a record."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}: {line[:80]!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Coercion:
    body: Record
    parsed: bool


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def dumps_record(record: Mapping[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def parse_all(text: str) -> list[Record]:
    if not text.strip():
        return []

    rows: list[Record] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            row = json.loads(line, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise DecodeError(line_number, line, exc.msg) from exc
        except ValueError as exc:
            raise DecodeError(line_number, line, str(exc)) from exc
        if not isinstance(row, dict):
            raise DecodeError(line_number, line, f"expected a JSON object, got {type(row).__name__}")
        rows.append(row)
    return rows


def serialize_all(records: list[Record]) -> str:
    if not records:
        return ""
    return "\n".join(dumps_record(record) for record in records) + "\n"


def _parse_object(raw: str) -> Record | None:
    # NaN, Infinity and overflowing numbers such as 1e999 cannot be stored.
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
        if not isinstance(payload, dict):
            return None
        dumps_record(payload)
    except ValueError:
        return None
    return payload


def coerce(raw: Any) -> Coercion:
    if isinstance(raw, str):
        if raw.strip().startswith("{"):
            payload = _parse_object(raw)
            if payload is not None:
                return Coercion(body=payload, parsed=True)
        return Coercion(body={"data": raw}, parsed=False)
    if isinstance(raw, Mapping):
        return Coercion(body=dict(raw), parsed=True)
    return Coercion(body={"data": raw}, parsed=False)


def with_id(body: Mapping[str, Any], record_id: int) -> Record:
    record: Record = {"id": record_id}
    record.update((key, value) for key, value in body.items() if key != "id")
    return record


def matches_term(record: Mapping[str, Any], term: str) -> bool:
    return term.casefold() in dumps_record(record).casefold()
