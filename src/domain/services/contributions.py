"""Per-day settlement contributions of sales and expense/income entries.

These projections are pure: the same records always produce the same
totals, whatever order they arrive in.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.domain.constants import (
    DEFAULT_EXCLUDED_INCOME_CATEGORIES,
    ZERO,
    storefront_commission_multiplier,
)
from src.domain.models import (
    Channel,
    DailyContributions,
    MovementEntry,
    MovementKind,
    PaymentMethod,
    RailContribution,
    Sale,
)
from src.domain.services.normalization import normalize_category
from src.utils.decimal_utils import round_money


def is_platform_rail_sale(sale: Sale) -> bool:
    """Storefront sales not paid through the processor."""
    return (
        sale.channel == Channel.STOREFRONT
        and sale.payment_method != PaymentMethod.PROCESSOR
    )


def is_processor_rail_sale(sale: Sale) -> bool:
    """Marketplace sales and storefront sales paid through the processor."""
    return sale.channel == Channel.MARKETPLACE or sale.is_storefront_processor


def platform_rail_amount(
    sale: Sale,
    multiplier: Decimal | None = None,
) -> Decimal:
    """Amount a storefront sale adds to the platform's pending balance.

    The stored commission is tax-exclusive; the platform withholds it with
    VAT and IIBB included, so it is re-inflated by ``multiplier``.
    """
    factor = multiplier or storefront_commission_multiplier()
    withheld = round_money(sale.commission * factor)
    return round_money(sale.gross_price - withheld)


def processor_rail_amount(sale: Sale) -> Decimal:
    """Amount a sale adds to the processor's pending balance."""
    amount = (
        sale.gross_price
        - sale.commission
        - sale.tax
        - sale.gross_receipts_tax
    )
    if not sale.is_storefront_processor:
        amount -= sale.shipping_cost
    return round_money(amount)


def aggregate_platform_rail(
    sales: Iterable[Sale],
    day: date,
    multiplier: Decimal | None = None,
) -> RailContribution:
    """Aggregate storefront-rail sales of ``day``.

    Args:
        sales: Candidate sales; other dates and rails are ignored.
        day: Ledger date.
        multiplier: Commission re-inflation factor (1.24 by default).

    Returns:
        RailContribution: Totals for the platform rail.
    """
    selected = [
        sale
        for sale in sales
        if sale.sale_date == day and is_platform_rail_sale(sale)
    ]
    return _sum_sales(
        selected,
        lambda sale: platform_rail_amount(sale, multiplier),
    )


def aggregate_processor_rail(
    sales: Iterable[Sale],
    day: date,
) -> RailContribution:
    """Aggregate processor-rail sales of ``day``."""
    selected = [
        sale
        for sale in sales
        if sale.sale_date == day and is_processor_rail_sale(sale)
    ]
    return _sum_sales(selected, processor_rail_amount)


def counts_as_income(
    entry: MovementEntry,
    excluded_categories: Iterable[str] = DEFAULT_EXCLUDED_INCOME_CATEGORIES,
) -> bool:
    """Business income outside the excluded ("other income") categories."""
    if entry.kind != MovementKind.INCOME or entry.is_personal:
        return False
    excluded = {normalize_category(name) for name in excluded_categories}
    return normalize_category(entry.category) not in excluded


def aggregate_movements(
    entries: Iterable[MovementEntry],
    day: date,
    excluded_categories: Iterable[str] = DEFAULT_EXCLUDED_INCOME_CATEGORIES,
) -> RailContribution:
    """Aggregate the processor-available impact of ``day``'s entries.

    Every expense reduces the balance, personal ones included; only
    business income outside the excluded categories increases it.
    """
    excluded = tuple(excluded_categories)
    count = 0
    total_gross = ZERO
    income = ZERO
    expenses = ZERO
    for entry in entries:
        if entry.entry_date != day:
            continue
        count += 1
        amount = round_money(entry.amount)
        total_gross += amount
        if entry.is_expense:
            expenses += amount
        elif counts_as_income(entry, excluded):
            income += amount
    return RailContribution(
        count=count,
        total_gross=round_money(total_gross),
        total_net_contribution=round_money(income - expenses),
    )


def aggregate_day(
    sales: Iterable[Sale],
    entries: Iterable[MovementEntry],
    day: date,
    *,
    multiplier: Decimal | None = None,
    excluded_categories: Iterable[str] = DEFAULT_EXCLUDED_INCOME_CATEGORIES,
) -> DailyContributions:
    """Run the three aggregators for ``day``."""
    sales = list(sales)
    return DailyContributions(
        day=day,
        platform_rail=aggregate_platform_rail(sales, day, multiplier),
        processor_rail=aggregate_processor_rail(sales, day),
        movements=aggregate_movements(entries, day, excluded_categories),
    )


def _sum_sales(sales: list[Sale], amount_of) -> RailContribution:
    total_gross = ZERO
    total_commission = ZERO
    total_tax = ZERO
    total_iibb = ZERO
    total_net = ZERO
    for sale in sales:
        total_gross += round_money(sale.gross_price)
        total_commission += round_money(sale.commission)
        total_tax += round_money(sale.tax)
        total_iibb += round_money(sale.gross_receipts_tax)
        total_net += amount_of(sale)
    return RailContribution(
        count=len(sales),
        total_gross=round_money(total_gross),
        total_commission=round_money(total_commission),
        total_tax=round_money(total_tax),
        total_gross_receipts_tax=round_money(total_iibb),
        total_net_contribution=round_money(total_net),
    )


__all__ = [
    "is_platform_rail_sale",
    "is_processor_rail_sale",
    "platform_rail_amount",
    "processor_rail_amount",
    "aggregate_platform_rail",
    "aggregate_processor_rail",
    "counts_as_income",
    "aggregate_movements",
    "aggregate_day",
]
