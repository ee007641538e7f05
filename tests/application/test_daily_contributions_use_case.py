"""Tests for GetDailyContributionsUseCase."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from src.application.use_cases.daily_contributions import (
    GetDailyContributionsUseCase,
)

from factories import (
    InMemoryMovementsRepository,
    InMemorySalesRepository,
    make_entry,
    make_sale,
)


def _use_case(sales=(), entries=(), **kwargs):
    return GetDailyContributionsUseCase(
        InMemorySalesRepository(sales),
        InMemoryMovementsRepository(entries),
        logger=MagicMock(),
        **kwargs,
    )


def test_range_covers_every_date_including_quiet_ones() -> None:
    sales = [make_sale("a", date(2025, 9, 3), "ML", "MercadoPago", 100)]
    use_case = _use_case(sales)

    result = use_case.aggregate_range(date(2025, 9, 1), date(2025, 9, 4))

    assert sorted(result) == [date(2025, 9, d) for d in range(1, 5)]
    assert result[date(2025, 9, 1)].processor_rail.count == 0
    assert result[date(2025, 9, 3)].processor_rail.total_net_contribution == (
        Decimal("100.00")
    )


def test_range_and_single_day_aggregation_agree() -> None:
    day = date(2025, 9, 2)
    sales = [
        make_sale("a", day, "TN", "PagoNube", 25000, commission=925),
        make_sale("b", day, "ML", "MercadoPago", 500, commission=50),
    ]
    entries = [make_entry("e", day, "Gasto", 10)]
    use_case = _use_case(sales, entries)

    single = use_case.aggregate(day)
    ranged = use_case.aggregate_range(date(2025, 9, 1), date(2025, 9, 3))[day]

    assert single == ranged
    assert use_case.platform_rail(day) == single.platform_rail
    assert use_case.processor_rail(day) == single.processor_rail
    assert use_case.movements(day) == single.movements
    assert single.platform_rail.total_net_contribution == Decimal("23853.00")


def test_configured_excluded_categories_apply() -> None:
    day = date(2025, 9, 2)
    entries = [
        make_entry("1", day, "Ingreso", 100, category="Reintegros"),
        make_entry("2", day, "Ingreso", 100, category="Otros Ingresos"),
    ]
    use_case = _use_case(
        entries=entries,
        excluded_income_categories=("Reintegros",),
    )

    assert use_case.movements(day).total_net_contribution == Decimal("100.00")
