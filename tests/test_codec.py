from __future__ import annotations

import json

import pytest

from rawdb.codec import DecodeError, coerce, dumps_record, matches_term, parse_all, serialize_all, with_id


def test_parse_all_skips_blank_lines_and_trims() -> None:
    text = '\n{"id":1,"data":"a"}\n\n{"id":2,"x":1}\n\n'

    assert parse_all(text) == [{"id": 1, "data": "a"}, {"id": 2, "x": 1}]


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_parse_all_empty_text(text: str) -> None:
    assert parse_all(text) == []


def test_parse_all_rejects_malformed_line() -> None:
    with pytest.raises(DecodeError) as excinfo:
        parse_all('{"id":1}\n{"id":2\n')

    assert excinfo.value.line_number == 2
    assert isinstance(excinfo.value, ValueError)


def test_parse_all_rejects_non_object_line() -> None:
    with pytest.raises(DecodeError):
        parse_all('{"id":1}\n[1,2]\n')


def test_serialize_all_is_compact_with_trailing_newline() -> None:
    text = serialize_all([{"id": 1, "data": "olá"}, {"id": 2, "x": 1}])

    assert text == '{"id":1,"data":"olá"}\n{"id":2,"x":1}\n'
    assert serialize_all([]) == ""


def test_serialize_then_parse_keeps_records() -> None:
    text = '{"id":3,"nested":{"a":[1,2]}}\n{"id":1,"data":null}\n'

    restored = parse_all(serialize_all(parse_all(text)))

    assert restored == [{"id": 3, "nested": {"a": [1, 2]}}, {"id": 1, "data": None}]


def test_coerce_plain_string_is_wrapped() -> None:
    result = coerce("hello")

    assert result.body == {"data": "hello"}
    assert result.parsed is False


def test_coerce_json_object_string_is_parsed() -> None:
    result = coerce('  {"x": 1, "tags": ["a"]}')

    assert result.body == {"x": 1, "tags": ["a"]}
    assert result.parsed is True


@pytest.mark.parametrize("raw", ["{not json", "{", '{"a": 1} trailing'])
def test_coerce_malformed_object_falls_back_to_wrapper(raw: str) -> None:
    result = coerce(raw)

    assert result.body == {"data": raw}
    assert result.parsed is False


def test_coerce_json_array_string_is_wrapped() -> None:
    assert coerce("[1, 2]").body == {"data": "[1, 2]"}


def test_coerce_mapping_is_copied() -> None:
    source = {"x": 1}
    result = coerce(source)

    assert result.body == {"x": 1}
    assert result.body is not source


def test_with_id_overwrites_and_leads() -> None:
    record = with_id({"x": 1, "id": 99}, 7)

    assert record == {"id": 7, "x": 1}
    assert list(record) == ["id", "x"]


def test_matches_term_is_case_insensitive_over_serialization() -> None:
    record = {"id": 1, "data": "Hello World"}

    assert matches_term(record, "HELLO")
    assert matches_term(record, '"id":1')
    assert not matches_term(record, "goodbye")
    assert json.loads(dumps_record(record)) == record


@pytest.mark.parametrize("raw", ['{"a": NaN}', '{"a": Infinity}', '{"a": -Infinity}', '{"a": 1e999}'])
def test_coerce_non_standard_numbers_fall_back_to_wrapper(raw: str) -> None:
    result = coerce(raw)

    assert result.body == {"data": raw}
    assert result.parsed is False


def test_dumps_record_refuses_nan() -> None:
    with pytest.raises(ValueError):
        dumps_record({"id": 1, "a": float("nan")})


def test_parse_all_rejects_nan_line() -> None:
    with pytest.raises(DecodeError) as excinfo:
        parse_all('{"id":1}\n{"id":2,"a":NaN}\n')

    assert excinfo.value.line_number == 2
