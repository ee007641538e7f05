"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
RATIO_STEP = Decimal("0.0001")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    """Round a monetary amount to cents (half up).

    Args:
        value: Amount as Decimal or any numeric accepted by coerce_decimal.

    Returns:
        Decimal: Amount quantized to two decimal places.
    """
    return coerce_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_ratio(value) -> Decimal:
    """Round a ratio to four decimal places (half up)."""
    return coerce_decimal(value).quantize(RATIO_STEP, rounding=ROUND_HALF_UP)


def parse_amount(value, default: Decimal | None = None) -> Decimal:
    """Parse an operator-entered amount.

    Accepts a decimal comma ("1234,50") and thousands separators
    ("1.234,50"). Blank input returns ``default`` when one is given.

    Raises:
        ValueError: If the value is blank without a default or not numeric.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise ValueError("amount is required")
        return default
    if isinstance(value, str):
        value = value.strip().replace(" ", "")
        if "," in value and "." in value:
            value = value.replace(".", "").replace(",", ".")
        else:
            value = value.replace(",", ".")
    try:
        return coerce_decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {value!r}") from exc


__all__ = [
    "coerce_decimal",
    "round_money",
    "round_ratio",
    "parse_amount",
    "CENT",
    "RATIO_STEP",
]
