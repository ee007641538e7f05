"""Net amount calculation for a single sale."""

from decimal import Decimal

from src.domain.constants import DEFAULT_VAT_RATE, ZERO
from src.domain.models import (
    Channel,
    PaymentMethod,
    Rate,
    SaleComputation,
)
from src.domain.services.tax_policies import select_tax_policy
from src.utils.decimal_utils import coerce_decimal, round_money, round_ratio


def compute_sale(
    gross_price,
    shipping_cost,
    product_cost,
    rate: Rate,
    channel: Channel,
    payment_method: PaymentMethod,
    manual_commission=None,
    manual_tax=None,
    *,
    vat_rate: Decimal = DEFAULT_VAT_RATE,
) -> SaleComputation:
    """Compute commissions, taxes, net price and margin of a sale.

    Every monetary figure is rounded to cents when computed.

    Args:
        gross_price: Price paid by the buyer.
        shipping_cost: Shipping cost borne by the seller.
        product_cost: Unit cost of the product sold.
        rate: Resolved rate for the sale's key.
        channel: Sales platform.
        payment_method: Payment method.
        manual_commission: Base commission override, used when positive.
        manual_tax: Gross-receipts tax (IIBB) entered by hand, used when
            positive.
        vat_rate: VAT rate applied over commissions.

    Returns:
        SaleComputation: Breakdown ready to be stored with the sale.
    """
    gross = coerce_decimal(gross_price)
    shipping = coerce_decimal(shipping_cost)
    cost = round_money(product_cost)
    manual_base = (
        coerce_decimal(manual_commission)
        if manual_commission is not None
        else None
    )
    manual_iibb = coerce_decimal(manual_tax) if manual_tax is not None else None

    price_after_discount = round_money(
        gross * (Decimal("1") - rate.discount_pct)
    )
    discount = round_money(gross) - price_after_discount

    if manual_base is not None and manual_base > 0:
        base_commission = round_money(manual_base)
    else:
        base_commission = round_money(price_after_discount * rate.commission_pct)
    extra_commission = round_money(
        price_after_discount * rate.extra_commission_pct
    )

    policy = select_tax_policy(channel, payment_method, vat_rate=vat_rate)
    base_split = policy.split_base(base_commission)
    extra_split = policy.split_extra(extra_commission)
    tax = base_split.tax + extra_split.tax
    gross_receipts_tax = policy.gross_receipts(
        base_split.exclusive + extra_split.exclusive,
        rate,
        manual_iibb,
    )
    commission = round_money(
        base_split.exclusive + extra_split.exclusive + rate.fixed_fee
    )

    net_price = price_after_discount - commission - tax - gross_receipts_tax
    if policy.deducts_shipping:
        net_price -= round_money(shipping)
    net_price = round_money(net_price)
    margin = round_money(net_price - cost)

    return SaleComputation(
        price_after_discount=price_after_discount,
        discount=discount,
        base_commission=base_split.exclusive,
        extra_commission=extra_split.exclusive,
        commission=commission,
        tax=tax,
        gross_receipts_tax=gross_receipts_tax,
        net_price=net_price,
        margin=margin,
        margin_over_price=_ratio(margin, gross),
        margin_over_cost=_ratio(margin, cost),
    )


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator == 0:
        return round_ratio(ZERO)
    return round_ratio(numerator / denominator)


__all__ = ["compute_sale"]
