"""Unit tests for currency parsing and formatting"""

import pytest
from decimal import Decimal
from dpa_portal.domain.currency import format_amount, parse_amount


def test_parse_amount_none_is_zero():
    assert parse_amount(None) == Decimal("0")


def test_parse_amount_numbers_pass_through():
    assert parse_amount(1500) == Decimal("1500")
    assert parse_amount(0.1) == Decimal("0.1")  # No binary float noise
    assert parse_amount(Decimal("12.34")) == Decimal("12.34")


def test_parse_amount_strips_formatting():
    """Currency symbols, separators and spaces are dropped before parsing"""
    assert parse_amount("5,000.00") == Decimal("5000.00")
    assert parse_amount("₦ 1,234,567.89") == Decimal("1234567.89")
    assert parse_amount("-250.50") == Decimal("-250.50")


def test_parse_amount_malformed_is_zero():
    assert parse_amount("") == Decimal("0")
    assert parse_amount("abc") == Decimal("0")
    assert parse_amount("--5") == Decimal("0")
    assert parse_amount(float("nan")) == Decimal("0")


def test_format_amount_groups_thousands_with_two_decimals():
    assert format_amount(100000) == "100,000.00"
    assert format_amount(Decimal("1234567.5")) == "1,234,567.50"
    assert format_amount("0") == "0.00"
    assert format_amount(None) == "0.00"


def test_parse_amount_reads_leading_number():
    """Trailing garbage after a valid number is ignored"""
    assert parse_amount("1.2.3") == Decimal("1.2")
    assert parse_amount("5-3") == Decimal("5")
    assert parse_amount(".5") == Decimal("0.5")
    assert parse_amount("-") == Decimal("0")


def test_format_amount_very_large_values():
    value = "1" * 30

    assert format_amount(value) == f"{int(value):,}.00"
    assert format_amount(Decimal(value + ".005")) == f"{int(value):,}.01"


def test_format_amount_rounds_half_up_to_cents():
    assert format_amount(Decimal("10.005")) == "10.01"
    assert format_amount(Decimal("10.004")) == "10.00"


@pytest.mark.parametrize("value", ["0", "0.01", "999.99", "1000", "1234567.89", "5000.5"])
def test_format_then_parse_keeps_cent_value(value):
    """Formatted amounts read back to the same value"""
    amount = Decimal(value)
    assert parse_amount(format_amount(amount)) == amount
