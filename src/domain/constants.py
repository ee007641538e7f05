"""Domain constants for settlement accounting."""

from decimal import Decimal

DEFAULT_VAT_RATE = Decimal("0.21")
DEFAULT_GROSS_RECEIPTS_RATE = Decimal("0.03")

DEFAULT_EXCLUDED_INCOME_CATEGORIES = ("Otros Ingresos",)

ZERO = Decimal("0")


def storefront_commission_multiplier(
    vat_rate: Decimal = DEFAULT_VAT_RATE,
    gross_receipts_rate: Decimal = DEFAULT_GROSS_RECEIPTS_RATE,
) -> Decimal:
    """Return the factor re-inflating a tax-exclusive storefront commission.

    With the default rates this is 1.24 (commission + 21% VAT + 3% IIBB).
    """
    return Decimal("1") + vat_rate + gross_receipts_rate


__all__ = [
    "DEFAULT_VAT_RATE",
    "DEFAULT_GROSS_RECEIPTS_RATE",
    "DEFAULT_EXCLUDED_INCOME_CATEGORIES",
    "ZERO",
    "storefront_commission_multiplier",
]
