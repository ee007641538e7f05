"""Composition root for wiring infrastructure adapters."""

from dataclasses import dataclass

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.ports.movements_repository import MovementsRepositoryPort
from src.application.ports.rates_repository import RatesRepositoryPort
from src.application.ports.sales_repository import SalesRepositoryPort
from src.application.use_cases.audit_ledger import AuditLedgerUseCase
from src.application.use_cases.daily_contributions import (
    GetDailyContributionsUseCase,
)
from src.application.use_cases.ledger_events import (
    LedgerChangeHandler,
    LedgerRecalculationWorker,
)
from src.application.use_cases.price_sale import PriceSaleUseCase
from src.application.use_cases.recalculate_ledger import (
    RecalculateLedgerUseCase,
)
from src.application.use_cases.resolve_rate import ResolveRateUseCase
from src.application.use_cases.settlement_ledger import SettlementLedgerUseCase
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.ledger_repository import SqlAlchemyLedgerRepository
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.movements_repository import (
    SqlAlchemyMovementsRepository,
)
from src.infrastructure.rates_repository import SqlAlchemyRatesRepository
from src.infrastructure.sales_repository import SqlAlchemySalesRepository
from src.infrastructure.settings import LedgerSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_rates_repository(
    db_port: DatabaseEnginePort | None = None,
) -> RatesRepositoryPort:
    """Return the rates repository."""
    return SqlAlchemyRatesRepository(db_port or build_database_adapter())


def build_sales_repository(
    db_port: DatabaseEnginePort | None = None,
) -> SalesRepositoryPort:
    """Return the sales repository."""
    return SqlAlchemySalesRepository(db_port or build_database_adapter())


def build_movements_repository(
    db_port: DatabaseEnginePort | None = None,
) -> MovementsRepositoryPort:
    """Return the expense/income repository."""
    return SqlAlchemyMovementsRepository(db_port or build_database_adapter())


def build_ledger_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerRepositoryPort:
    """Return the settlement ledger repository."""
    resolved_settings = settings or LedgerSettings.from_env()
    return SqlAlchemyLedgerRepository(
        db_port or build_database_adapter(),
        advisory_lock_key=resolved_settings.advisory_lock_key,
        logger=get_app_logger(),
    )


def build_price_sale_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> PriceSaleUseCase:
    """Return the sale pricing use case."""
    resolved_settings = settings or LedgerSettings.from_env()
    resolve_rate = ResolveRateUseCase(
        build_rates_repository(db_port),
        logger=get_app_logger(),
    )
    return PriceSaleUseCase(
        resolve_rate,
        vat_rate=resolved_settings.vat_rate,
        gross_receipts_rate=resolved_settings.gross_receipts_rate,
        logger=get_app_logger(),
    )


def build_daily_contributions_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetDailyContributionsUseCase:
    """Return the daily contributions aggregator."""
    resolved_settings = settings or LedgerSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    return GetDailyContributionsUseCase(
        build_sales_repository(resolved_db),
        build_movements_repository(resolved_db),
        commission_multiplier=resolved_settings.commission_multiplier,
        excluded_income_categories=(
            resolved_settings.excluded_income_categories
        ),
        logger=get_app_logger(),
    )


@dataclass(frozen=True)
class LedgerServices:
    """Ledger use cases sharing one repository and one worker queue."""

    ledger: SettlementLedgerUseCase
    recalculate: RecalculateLedgerUseCase
    worker: LedgerRecalculationWorker
    change_handler: LedgerChangeHandler
    audit: AuditLedgerUseCase


def build_ledger_services(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerServices:
    """Wire the ledger use cases around a single recalculation worker.

    Manual inputs and sale/movement changes are published to the worker's
    queue; callers decide whether to ``start()`` it or ``drain()`` it.
    """
    resolved_settings = settings or LedgerSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    logger = get_app_logger()
    ledger_repository = build_ledger_repository(resolved_db, resolved_settings)
    contributions = build_daily_contributions_use_case(
        resolved_db,
        resolved_settings,
    )
    recalculate = RecalculateLedgerUseCase(
        ledger_repository,
        contributions,
        chunk_days=resolved_settings.cascade_chunk_days,
        logger=logger,
    )
    worker = LedgerRecalculationWorker(recalculate, logger=logger)
    return LedgerServices(
        ledger=SettlementLedgerUseCase(
            ledger_repository,
            on_change=worker.submit,
            logger=logger,
        ),
        recalculate=recalculate,
        worker=worker,
        change_handler=LedgerChangeHandler(
            worker.submit,
            ledger_repository,
            logger=logger,
        ),
        audit=AuditLedgerUseCase(ledger_repository, contributions, logger=logger),
    )


__all__ = [
    "LedgerServices",
    "build_database_adapter",
    "build_rates_repository",
    "build_sales_repository",
    "build_movements_repository",
    "build_ledger_repository",
    "build_price_sale_use_case",
    "build_daily_contributions_use_case",
    "build_ledger_services",
]
