"""Sale domain models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from src.domain.models.enums import Channel, Condition, PaymentMethod


@dataclass(frozen=True)
class Sale:
    """Persisted sale as read by the settlement ledger.

    Commission and tax amounts are always tax-exclusive as stored.
    """

    id: str
    sale_date: date
    channel: Channel
    payment_method: PaymentMethod
    gross_price: Decimal
    shipping_cost: Decimal = Decimal("0")
    product_cost: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    gross_receipts_tax: Decimal = Decimal("0")
    net_price: Decimal = Decimal("0")
    margin: Decimal = Decimal("0")
    condition: Condition = Condition.NORMAL
    quantity: int = 1
    product_id: str | None = None
    buyer: str = ""
    tracking_url: str | None = None
    shipping_status: str | None = None
    courier: str | None = None
    shipping_address: str | None = None
    external_order_id: str | None = None

    @property
    def is_storefront_processor(self) -> bool:
        """Storefront sale paid through the payment processor."""
        return (
            self.channel == Channel.STOREFRONT
            and self.payment_method == PaymentMethod.PROCESSOR
        )


@dataclass(frozen=True)
class SaleDraft:
    """Inputs needed to price a sale before it is persisted."""

    channel: Channel
    payment_method: PaymentMethod
    gross_price: Decimal
    shipping_cost: Decimal = Decimal("0")
    product_cost: Decimal = Decimal("0")
    condition: Condition = Condition.NORMAL
    manual_commission: Decimal | None = None
    manual_tax: Decimal | None = None


@dataclass(frozen=True)
class SaleComputation:
    """Result of pricing a sale.

    Attributes:
        price_after_discount: Gross price minus the rate discount.
        discount: Amount removed by the discount.
        base_commission: Base commission, tax-exclusive.
        extra_commission: Extra commission, tax-exclusive.
        commission: Stored commission (base + extra + fixed fee).
        tax: VAT over commissions.
        gross_receipts_tax: IIBB withheld over commissions.
        net_price: Amount the seller receives for the sale.
        margin: Net price minus product cost.
        margin_over_price: Margin divided by gross price.
        margin_over_cost: Margin divided by product cost.
    """

    price_after_discount: Decimal
    discount: Decimal
    base_commission: Decimal
    extra_commission: Decimal
    commission: Decimal
    tax: Decimal
    gross_receipts_tax: Decimal
    net_price: Decimal
    margin: Decimal
    margin_over_price: Decimal
    margin_over_cost: Decimal


__all__ = ["Sale", "SaleDraft", "SaleComputation"]
