"""Models describing ledger recalculation requests and outcomes."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RecalculationPlan:
    """Cascade plan produced by the differential planner."""

    from_date: date
    reason: str


@dataclass(frozen=True)
class LedgerInputChanged:
    """Event asking the ledger worker to cascade from ``from_date``."""

    from_date: date
    reason: str


@dataclass(frozen=True)
class CascadeResult:
    """Summary of a cascade run.

    Attributes:
        start_date: First date derived.
        end_date: Last date derived (None when nothing was derived).
        processed_days: Number of dates derived.
        written_days: Number of dates whose stored values changed.
        created_days: Number of gap dates materialised.
    """

    start_date: date
    end_date: date | None
    processed_days: int = 0
    written_days: int = 0
    created_days: int = 0


@dataclass(frozen=True)
class BalanceDrift:
    """Difference between stored and re-derived balances for one date."""

    ledger_date: date
    expected: dict[str, Decimal] = field(default_factory=dict)
    actual: dict[str, Decimal] = field(default_factory=dict)
    reason: str = "balance mismatch"

    @property
    def fields(self) -> list[str]:
        return sorted(
            name
            for name in self.expected
            if self.expected[name] != self.actual.get(name)
        )


@dataclass(frozen=True)
class AuditReport:
    """Result of a ledger continuity audit."""

    checked_days: int
    drifts: list[BalanceDrift]

    @property
    def is_consistent(self) -> bool:
        return not self.drifts


__all__ = [
    "RecalculationPlan",
    "LedgerInputChanged",
    "CascadeResult",
    "BalanceDrift",
    "AuditReport",
]
