"""Rate (fee table) domain model."""

from dataclasses import dataclass
from decimal import Decimal

from src.domain.constants import DEFAULT_GROSS_RECEIPTS_RATE
from src.domain.models.enums import Channel, Condition, PaymentMethod


@dataclass(frozen=True)
class Rate:
    """Commission, tax and discount settings for one rate key.

    Percentages are fractions (``0.035`` means 3.5%).

    Attributes:
        channel: Sales platform.
        payment_method: Payment method of the sale.
        condition: Commercial condition.
        commission_pct: Base commission over the discounted price.
        fixed_fee: Fixed amount charged per operation.
        discount_pct: Discount applied before commissions.
        extra_commission_pct: Secondary commission over the discounted price.
        gross_receipts_pct: IIBB rate applied over commissions.
    """

    channel: Channel
    payment_method: PaymentMethod
    condition: Condition
    commission_pct: Decimal
    fixed_fee: Decimal = Decimal("0")
    discount_pct: Decimal = Decimal("0")
    extra_commission_pct: Decimal = Decimal("0")
    gross_receipts_pct: Decimal = DEFAULT_GROSS_RECEIPTS_RATE


__all__ = ["Rate"]
