"""Application use cases package."""

from .audit_ledger import AuditLedgerUseCase
from .daily_contributions import GetDailyContributionsUseCase
from .ledger_events import LedgerChangeHandler, LedgerRecalculationWorker
from .price_sale import PriceSaleUseCase
from .recalculate_ledger import RecalculateLedgerUseCase
from .resolve_rate import ResolveRateUseCase
from .settlement_ledger import SettlementLedgerUseCase

__all__ = [
    "AuditLedgerUseCase",
    "GetDailyContributionsUseCase",
    "LedgerChangeHandler",
    "LedgerRecalculationWorker",
    "PriceSaleUseCase",
    "RecalculateLedgerUseCase",
    "ResolveRateUseCase",
    "SettlementLedgerUseCase",
]
