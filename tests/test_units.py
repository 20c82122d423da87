from decimal import Decimal

import pytest

from utils.exceptions import MalformedNumericInput
from utils.units import format_units, parse_units, parse_units_strict, round_cents, to_units


@pytest.mark.parametrize("text, expected", [
    ("173.27", Decimal("173.27")),
    ("+173.20", Decimal("173.2")),
    ("-2.45", Decimal("-2.45")),
    ("4.5u", Decimal("4.5")),
    ("$ 1,204.10", Decimal("1204.10")),
    (".5", Decimal("0.5")),
    ("7.", Decimal("7")),
    ("1.2.3", Decimal("1.2")),
    ("5-3", Decimal("5")),
])
def test_parse_reads_leading_number(text, expected):
    assert parse_units(text) == expected


@pytest.mark.parametrize("text", ["abc", "", "-", ".", "--5", "-.", "+", "units"])
def test_parse_falls_back_to_zero(text):
    value = parse_units(text)
    assert value == Decimal("0")
    assert value.is_finite()


def test_strict_parse_names_the_failure():
    with pytest.raises(MalformedNumericInput) as exc:
        parse_units_strict("abc")
    assert exc.value.raw_text == "abc"
    assert "number" in exc.value.user_message


def test_parse_never_returns_non_finite():
    for text in ["NaN", "Infinity", "-inf", "1e999", "9" * 400]:
        assert parse_units(text).is_finite()


@pytest.mark.parametrize("value, expected", [
    (0, "+0.00"),
    (Decimal("-2.45"), "-2.45"),
    (Decimal("173.2"), "+173.20"),
    (173.2, "+173.20"),
    (Decimal("168.45"), "+168.45"),
    (Decimal("-0"), "+0.00"),
    (Decimal("1.005"), "+1.01"),
    (Decimal("-1.005"), "-1.01"),
    (Decimal("-0.001"), "-0.00"),
    (Decimal("12345678901234567890123456789.5"), "+12345678901234567890123456789.50"),
])
def test_format_two_decimals_with_sign(value, expected):
    assert format_units(value) == expected


@pytest.mark.parametrize("text", ["0", "0.01", "-0.01", "173.27", "-2.37", "1000000", "-99999.99"])
def test_round_trip_at_cents_precision(text):
    x = Decimal(text)
    assert parse_units(format_units(x)) == x


def test_round_trip_rounds_extra_precision():
    assert parse_units(format_units(Decimal("2.349"))) == Decimal("2.35")


@pytest.mark.parametrize("value, expected", [
    (1e20, Decimal("1E+20")),
    (1e-7, Decimal("1E-7")),
    (173.27, Decimal("173.27")),
    (-2, Decimal("-2")),
    (Decimal("4.38"), Decimal("4.38")),
    ("+4.5u", Decimal("4.5")),
    (float("inf"), Decimal("0")),
    (float("nan"), Decimal("0")),
    (Decimal("NaN"), Decimal("0")),
    (None, Decimal("0")),
    (True, Decimal("0")),
])
def test_to_units(value, expected):
    assert to_units(value) == expected


def test_round_cents_keeps_large_values():
    assert round_cents(Decimal("12345678901234567890123456789.555")) == Decimal("12345678901234567890123456789.56")
