"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_repository import LedgerRepositoryPort
from .movements_repository import MovementsRepositoryPort
from .rates_repository import RatesRepositoryPort
from .sales_repository import SalesRepositoryPort

__all__ = [
    "DatabaseEnginePort",
    "LedgerRepositoryPort",
    "MovementsRepositoryPort",
    "RatesRepositoryPort",
    "SalesRepositoryPort",
]
