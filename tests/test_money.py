"""Tests for money helpers"""
from decimal import Decimal

from simcart.services.money import (
    format_decimal,
    parse_decimal,
    percent,
    round_money,
    to_decimal,
    to_float,
)


def test_to_decimal_from_float_keeps_short_repr():
    assert to_decimal(0.1) == Decimal("0.1")


def test_to_decimal_invalid_is_zero():
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal(None) == Decimal("0")


def test_parse_decimal_rejects_garbage():
    assert parse_decimal(" 12.5 ") == Decimal("12.5")
    assert parse_decimal("abc") is None
    assert parse_decimal("NaN") is None
    assert parse_decimal(None) is None


def test_format_decimal():
    assert format_decimal(Decimal("15.50")) == "15.5"
    assert format_decimal(Decimal("100")) == "100"
    assert format_decimal(Decimal("-0.25")) == "-0.25"
    assert format_decimal(Decimal("0.00")) == "0"


def test_percent_and_rounding():
    assert percent(Decimal("400"), 21) == Decimal("84")
    assert round_money(Decimal("2.005")) == Decimal("2.01")
    assert to_float(Decimal("484.00")) == 484.0
