"""Use case aggregating the daily ledger inputs from sales and movements."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from src.application.ports.movements_repository import MovementsRepositoryPort
from src.application.ports.sales_repository import SalesRepositoryPort
from src.domain.constants import (
    DEFAULT_EXCLUDED_INCOME_CATEGORIES,
    storefront_commission_multiplier,
)
from src.domain.models import DailyContributions, RailContribution
from src.domain.services.contributions import (
    aggregate_day,
    aggregate_movements,
    aggregate_platform_rail,
    aggregate_processor_rail,
)
from src.infrastructure.logging.logger import get_app_logger


class GetDailyContributionsUseCase:
    """Read-only projections of sales and movements per ledger date."""

    def __init__(
        self,
        sales_repository: SalesRepositoryPort,
        movements_repository: MovementsRepositoryPort,
        *,
        commission_multiplier: Decimal | None = None,
        excluded_income_categories: Iterable[str] = (
            DEFAULT_EXCLUDED_INCOME_CATEGORIES
        ),
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            sales_repository: Port providing sales by date.
            movements_repository: Port providing expense/income entries.
            commission_multiplier: Storefront commission re-inflation
                factor; derived from the default rates when omitted.
            excluded_income_categories: Income categories with no ledger
                impact.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._sales = sales_repository
        self._movements = movements_repository
        self._multiplier = (
            commission_multiplier or storefront_commission_multiplier()
        )
        self._excluded = tuple(excluded_income_categories)
        self._logger = logger or get_app_logger()

    def platform_rail(self, day: date) -> RailContribution:
        """Storefront-rail aggregate for ``day``."""
        sales = self._sales.fetch_sales_between(day, day)
        return aggregate_platform_rail(sales, day, self._multiplier)

    def processor_rail(self, day: date) -> RailContribution:
        """Processor-rail aggregate for ``day``."""
        sales = self._sales.fetch_sales_between(day, day)
        return aggregate_processor_rail(sales, day)

    def movements(self, day: date) -> RailContribution:
        """Expense/income aggregate for ``day``."""
        entries = self._movements.fetch_movements_between(day, day)
        return aggregate_movements(entries, day, self._excluded)

    def aggregate(self, day: date) -> DailyContributions:
        """Run the three aggregators for ``day``."""
        return self.aggregate_range(day, day)[day]

    def aggregate_range(
        self,
        start: date,
        end: date,
    ) -> dict[date, DailyContributions]:
        """Aggregate every date in ``[start, end]`` with one read per source.

        Returns:
            dict[date, DailyContributions]: One entry per calendar date,
            including dates without activity.
        """
        sales_by_day = defaultdict(list)
        for sale in self._sales.fetch_sales_between(start, end):
            sales_by_day[sale.sale_date].append(sale)
        entries_by_day = defaultdict(list)
        for entry in self._movements.fetch_movements_between(start, end):
            entries_by_day[entry.entry_date].append(entry)

        result = {}
        day = start
        while day <= end:
            result[day] = aggregate_day(
                sales_by_day.get(day, ()),
                entries_by_day.get(day, ()),
                day,
                multiplier=self._multiplier,
                excluded_categories=self._excluded,
            )
            day += timedelta(days=1)
        self._logger.debug(
            f"Aggregated ledger inputs {start} to {end}: "
            f"{sum(len(v) for v in sales_by_day.values())} sales, "
            f"{sum(len(v) for v in entries_by_day.values())} movements"
        )
        return result


__all__ = ["GetDailyContributionsUseCase"]
