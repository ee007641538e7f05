"""Tests for the per-day contribution aggregators."""

from datetime import date
from decimal import Decimal

from src.domain.constants import storefront_commission_multiplier
from src.domain.services.contributions import (
    aggregate_day,
    aggregate_movements,
    aggregate_platform_rail,
    aggregate_processor_rail,
)

from factories import make_entry, make_sale

DAY = date(2025, 9, 2)


def test_storefront_rail_reinflates_stored_commission() -> None:
    """25000 - 925 x 1.24 = 23853."""
    sale = make_sale("s1", DAY, "TN", "PagoNube", 25000, commission=925)

    result = aggregate_platform_rail([sale], DAY)

    assert result.count == 1
    assert result.total_gross == Decimal("25000.00")
    assert result.total_commission == Decimal("925.00")
    assert result.total_net_contribution == Decimal("23853.00")


def test_storefront_rail_multiplier_follows_configured_rates() -> None:
    """A 5% IIBB rate re-inflates by 1.26 instead of 1.24."""
    sale = make_sale("s1", DAY, "TN", "PagoNube", 1000, commission=100)
    multiplier = storefront_commission_multiplier(
        Decimal("0.21"),
        Decimal("0.05"),
    )

    result = aggregate_platform_rail([sale], DAY, multiplier)

    assert result.total_net_contribution == Decimal("874.00")


def test_processor_rail_selects_marketplace_and_storefront_processor() -> None:
    """Shipping is deducted except for storefront sales paid by processor."""
    sales = [
        make_sale(
            "ml",
            DAY,
            "ML",
            "MercadoPago",
            12100,
            commission=1210,
            tax="254.10",
            gross_receipts_tax=50,
            shipping_cost=800,
        ),
        make_sale(
            "tn-mp",
            DAY,
            "TN",
            "MercadoPago",
            20000,
            commission=1200,
            tax=252,
            gross_receipts_tax=30,
            shipping_cost=1500,
        ),
        make_sale("tn", DAY, "TN", "PagoNube", 5000, commission=100),
    ]

    processor = aggregate_processor_rail(sales, DAY)
    platform = aggregate_platform_rail(sales, DAY)

    assert processor.count == 2
    assert processor.total_net_contribution == Decimal("28303.90")
    assert processor.total_tax == Decimal("506.10")
    assert platform.count == 1
    assert platform.total_net_contribution == Decimal("4876.00")


def test_aggregators_ignore_other_dates() -> None:
    """Only the requested date contributes."""
    sales = [
        make_sale("a", DAY, "ML", "MercadoPago", 100),
        make_sale("b", date(2025, 9, 3), "ML", "MercadoPago", 900),
    ]

    result = aggregate_processor_rail(sales, DAY)

    assert result.count == 1
    assert result.total_net_contribution == Decimal("100.00")


def test_movements_exclude_personal_and_other_income_only() -> None:
    """Every expense counts; personal and other income do not."""
    entries = [
        make_entry("1", DAY, "Ingreso", 5000, category="Ventas mayoristas"),
        make_entry("2", DAY, "Ingreso", 2000, category="otros  ingresos"),
        make_entry("3", DAY, "Ingreso", 700, is_personal=True),
        make_entry("4", DAY, "Gasto", 1000, category="Envíos"),
        make_entry("5", DAY, "Gasto", 300, is_personal=True),
    ]

    result = aggregate_movements(entries, DAY)

    assert result.count == 5
    assert result.total_net_contribution == Decimal("3700.00")


def test_aggregation_is_order_independent() -> None:
    """Shuffled inputs give identical totals."""
    sales = [
        make_sale("a", DAY, "TN", "PagoNube", "100.10", commission="3.33"),
        make_sale("b", DAY, "TN", "Transferencia", "250.55", commission="7.77"),
        make_sale("c", DAY, "ML", "MercadoPago", "99.99", commission="12.10"),
    ]
    entries = [
        make_entry("1", DAY, "Gasto", "10.01"),
        make_entry("2", DAY, "Ingreso", "20.02"),
    ]

    forward = aggregate_day(sales, entries, DAY)
    backward = aggregate_day(sales[::-1], entries[::-1], DAY)

    assert forward == backward


def test_net_movement_sums_sales_and_movements() -> None:
    """Day total: storefront 23853 + marketplace 450 - expense 100."""
    sales = [
        make_sale("a", DAY, "TN", "PagoNube", 25000, commission=925),
        make_sale("b", DAY, "ML", "MercadoPago", 500, commission=50),
    ]
    entries = [make_entry("1", DAY, "Gasto", 100)]

    result = aggregate_day(sales, entries, DAY)

    assert result.net_movement == Decimal("24203.00")
