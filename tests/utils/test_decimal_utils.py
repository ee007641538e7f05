"""Tests for Decimal helpers."""

from decimal import Decimal

import pytest

from src.utils.decimal_utils import (
    coerce_decimal,
    parse_amount,
    round_money,
    round_ratio,
)


def test_round_money_rounds_half_up() -> None:
    assert round_money("2.345") == Decimal("2.35")
    assert round_money(Decimal("-2.345")) == Decimal("-2.35")
    assert round_money(None) == Decimal("0.00")


def test_round_ratio_keeps_four_places() -> None:
    assert round_ratio(Decimal("0.123456")) == Decimal("0.1235")


def test_coerce_decimal_avoids_float_artifacts() -> None:
    assert coerce_decimal(0.1) == Decimal("0.1")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1234,50", Decimal("1234.50")),
        ("1.234,50", Decimal("1234.50")),
        (" 99.9 ", Decimal("99.9")),
        (10, Decimal("10")),
    ],
)
def test_parse_amount_accepts_operator_formats(raw, expected) -> None:
    assert parse_amount(raw) == expected


def test_parse_amount_blank_and_invalid() -> None:
    assert parse_amount("", default=Decimal("0")) == Decimal("0")
    with pytest.raises(ValueError):
        parse_amount("")
    with pytest.raises(ValueError):
        parse_amount("abc")
