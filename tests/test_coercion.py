import pytest

from coercion import (
    MAPPING,
    SCALAR,
    SEQUENCE,
    hole_index,
    is_filled,
    is_numeric,
    raw_items,
    raw_value,
    sanitize_fir_enum,
    to_checked_int1_or_null,
    to_nullable_int,
)


@pytest.mark.parametrize("value", [True, 1, "1", "true", "TRUE", "on", " On "])
def test_checked_values_become_one(value):
    assert to_checked_int1_or_null(value) == 1


@pytest.mark.parametrize("value", [False, 0, "0", "", "no", None, "off", 2, "yes"])
def test_unchecked_values_are_absent(value):
    assert to_checked_int1_or_null(value) is None


def test_nullable_int_truncates_and_rejects_junk():
    assert to_nullable_int(" 4 ") == 4
    assert to_nullable_int("4.9") == 4
    assert to_nullable_int(5) == 5
    assert to_nullable_int("0") == 0
    assert to_nullable_int("") is None
    assert to_nullable_int("abc") is None
    assert to_nullable_int(None) is None
    assert to_nullable_int(["4"]) is None


def test_fir_enum_is_case_sensitive():
    assert sanitize_fir_enum("Hit") == "Hit"
    assert sanitize_fir_enum(" MissedUnspecified ") == "MissedUnspecified"
    assert sanitize_fir_enum("hit") is None
    assert sanitize_fir_enum("HIT") is None
    assert sanitize_fir_enum("Missed") is None
    assert sanitize_fir_enum("") is None


def test_numeric_keys():
    assert is_numeric("3")
    assert is_numeric(3)
    assert not is_numeric(True)
    assert not is_numeric("abc")
    assert hole_index("7") == 7
    assert hole_index("x7") is None


def test_raw_value_kinds():
    assert raw_value({"a": 1}).kind == MAPPING
    assert raw_value(["a"]).kind == SEQUENCE
    assert raw_value("a").kind == SCALAR
    assert raw_items(["x", "y"]) == [(0, "x"), (1, "y")]
    assert raw_items("scalar") == []


def test_is_filled_follows_form_emptiness():
    assert is_filled("1")
    assert is_filled(1)
    assert not is_filled("0")
    assert not is_filled("")
    assert not is_filled(None)
    assert not is_filled(False)
