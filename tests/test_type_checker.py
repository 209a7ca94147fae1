import sys
from datetime import date, datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.payload_validation.type_checker import (
    check_items,
    check_type,
    is_date_like,
    is_object_id,
    kind_of,
)
from src.payload_validation.types import TypeDescriptor, Violation


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "null"),
        (True, "boolean"),
        (5, "number"),
        (2.5, "number"),
        ("x", "string"),
        (datetime(2024, 1, 1), "Date"),
        ({"a": 1}, "object"),
        ([1], "array"),
        ((1, 2), "array"),
        ({1, 2}, "set"),
    ],
)
def test_kind_of_reports_runtime_kind(value, expected):
    assert kind_of(value) == expected


def test_numeric_string_is_not_a_number():
    violations = check_type("5", TypeDescriptor.NUMBER, "age")

    assert violations == [
        Violation("age", "'age' must be of type 'number', received 'string'")
    ]


def test_boolean_is_not_a_number():
    assert check_type(True, TypeDescriptor.NUMBER, "count")
    assert check_type(3, TypeDescriptor.NUMBER, "count") == []
    assert check_type(3.5, TypeDescriptor.NUMBER, "count") == []


def test_string_and_boolean_require_exact_kind():
    assert check_type("yes", TypeDescriptor.STRING, "name") == []
    assert check_type(1, TypeDescriptor.STRING, "name")[0].message == (
        "'name' must be of type 'string', received 'number'"
    )
    assert check_type(False, TypeDescriptor.BOOLEAN, "active") == []
    assert check_type("false", TypeDescriptor.BOOLEAN, "active")


def test_object_id_accepts_24_hex_characters():
    assert check_type("507f1f77bcf86cd799439011", TypeDescriptor.OBJECT_ID, "id") == []
    assert check_type("507F1F77BCF86CD799439011", TypeDescriptor.OBJECT_ID, "id") == []


def test_object_id_rejects_other_formats():
    violations = check_type("not-an-id", TypeDescriptor.OBJECT_ID, "id")

    assert len(violations) == 1
    assert violations[0].path == "id"
    assert "'ObjectId'" in violations[0].message
    assert check_type("507f1f77bcf86cd79943901", TypeDescriptor.OBJECT_ID, "id")
    assert check_type(12345, TypeDescriptor.OBJECT_ID, "id")


def test_object_id_accepts_upper_case_hex():
    # Upper case is accepted like lower case; only length and hex digits matter.
    assert is_object_id("ABCDEF0123456789ABCDEF01")
    assert is_object_id("abcdef0123456789abcdef01")
    assert not is_object_id("ABCDEF0123456789ABCDEF0G")
    assert not is_object_id("abcdef0123456789abcdef01\n")


def test_object_id_does_not_flag_null():
    assert check_type(None, TypeDescriptor.OBJECT_ID, "id") == []


@pytest.mark.parametrize(
    "value",
    [
        datetime(2024, 5, 1, 12, 30),
        date(2024, 5, 1),
        "2024-05-01",
        "2024-05-01T12:30:00",
        "2024-05-01T12:30:00Z",
        "Wed, 01 May 2024 12:30:00 GMT",
        1714566600000,
        0,
    ],
)
def test_date_accepts_dates_and_parseable_values(value):
    assert is_date_like(value)
    assert check_type(value, TypeDescriptor.DATE, "when") == []


@pytest.mark.parametrize(
    "value", ["", "not a date", "2024-13-45", float("nan"), 10**30, 10**400, True, None, {}]
)
def test_date_rejects_unparseable_values(value):
    violations = check_type(value, TypeDescriptor.DATE, "when")

    assert len(violations) == 1
    assert "must be of type 'Date'" in violations[0].message


def test_object_must_be_a_mapping():
    assert check_type({}, TypeDescriptor.OBJECT, "address") == []
    assert check_type([], TypeDescriptor.OBJECT, "address")[0].message == (
        "'address' must be of type 'object', received 'array'"
    )
    assert check_type(None, TypeDescriptor.OBJECT, "address")


def test_array_must_be_a_sequence():
    assert check_type([], TypeDescriptor.ARRAY, "tags") == []
    assert check_type("abc", TypeDescriptor.ARRAY, "tags")[0].message == (
        "'tags' must be of type 'array', received 'string'"
    )


def test_unknown_type_always_passes():
    for value in (None, 1, "x", [], {}, object()):
        assert check_type(value, TypeDescriptor.UNKNOWN, "anything") == []


def test_check_items_uses_item_wording_in_index_order():
    violations = check_items([1, "a", True], TypeDescriptor.STRING, "tags")

    assert [v.message for v in violations] == [
        "each item in 'tags' must be of type 'string', received 'number'",
        "each item in 'tags' must be of type 'string', received 'boolean'",
    ]
    assert all(v.path == "tags" for v in violations)


def test_check_items_flags_null_object_ids():
    violations = check_items(
        ["507f1f77bcf86cd799439011", None], TypeDescriptor.OBJECT_ID, "refs"
    )

    assert violations == [
        Violation("refs", "each item in 'refs' must be of type 'ObjectId', received 'null'")
    ]


def test_check_items_skips_nested_item_types():
    assert check_items([1, "a"], TypeDescriptor.OBJECT, "rows") == []
    assert check_items([1, "a"], TypeDescriptor.ARRAY, "rows") == []
    assert check_items([1, "a"], TypeDescriptor.UNKNOWN, "rows") == []
