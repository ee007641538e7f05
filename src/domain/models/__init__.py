"""Domain models package."""

from .enums import (
    ChangeOperation,
    Channel,
    Condition,
    MovementKind,
    PaymentMethod,
)
from .ledger import (
    DailyContributions,
    LedgerRecord,
    PlatformRail,
    ProcessorRail,
    RailContribution,
)
from .movements import MovementEntry
from .rates import Rate
from .recalculation import (
    AuditReport,
    BalanceDrift,
    CascadeResult,
    LedgerInputChanged,
    RecalculationPlan,
)
from .sales import Sale, SaleComputation, SaleDraft

__all__ = [
    "ChangeOperation",
    "Channel",
    "Condition",
    "MovementKind",
    "PaymentMethod",
    "DailyContributions",
    "LedgerRecord",
    "PlatformRail",
    "ProcessorRail",
    "RailContribution",
    "MovementEntry",
    "Rate",
    "AuditReport",
    "BalanceDrift",
    "CascadeResult",
    "LedgerInputChanged",
    "RecalculationPlan",
    "Sale",
    "SaleComputation",
    "SaleDraft",
]
