"""Settlement ledger domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from src.domain.constants import ZERO


@dataclass(frozen=True)
class ProcessorRail:
    """Balances held by the payment processor.

    Attributes:
        available: Cash usable now.
        pending_settlement: Earned but not yet released.
        settled_today: Released by the processor on the record date.
    """

    available: Decimal = ZERO
    pending_settlement: Decimal = ZERO
    settled_today: Decimal = ZERO


@dataclass(frozen=True)
class PlatformRail:
    """Balances held by the storefront platform.

    Attributes:
        pending_settlement: Owed by the platform, not yet transferred.
        settled_today: Transferred to the processor on the record date.
        tax_withheld_today: IIBB withheld during that transfer.
    """

    pending_settlement: Decimal = ZERO
    settled_today: Decimal = ZERO
    tax_withheld_today: Decimal = ZERO


@dataclass(frozen=True)
class LedgerRecord:
    """One calendar day of the settlement ledger."""

    ledger_date: date
    processor: ProcessorRail = field(default_factory=ProcessorRail)
    platform: PlatformRail = field(default_factory=PlatformRail)
    notes: str = ""
    is_opening: bool = False
    needs_recalculation: bool = False
    updated_at: datetime | None = None

    @property
    def platform_transfer_net(self) -> Decimal:
        """Platform to processor transfer net of withheld tax."""
        return self.platform.settled_today - self.platform.tax_withheld_today

    @property
    def processor_total(self) -> Decimal:
        return self.processor.available + self.processor.pending_settlement

    @property
    def total_available(self) -> Decimal:
        """Cash usable now plus what the platform still owes."""
        return self.processor.available + self.platform.pending_settlement

    def same_balances(self, other: "LedgerRecord") -> bool:
        """Return True when both records hold identical rail values."""
        return (
            self.processor == other.processor
            and self.platform == other.platform
        )


@dataclass(frozen=True)
class RailContribution:
    """Aggregated settlement contribution of one input family for a day.

    Attributes:
        count: Number of records aggregated.
        total_gross: Sum of gross prices (or amounts for movements).
        total_commission: Sum of stored commissions.
        total_tax: Sum of VAT amounts.
        total_gross_receipts_tax: Sum of IIBB amounts.
        total_net_contribution: Net effect on the target balance.
    """

    count: int = 0
    total_gross: Decimal = ZERO
    total_commission: Decimal = ZERO
    total_tax: Decimal = ZERO
    total_gross_receipts_tax: Decimal = ZERO
    total_net_contribution: Decimal = ZERO


@dataclass(frozen=True)
class DailyContributions:
    """The three per-day aggregates feeding one ledger derivation."""

    day: date
    platform_rail: RailContribution
    processor_rail: RailContribution
    movements: RailContribution

    @property
    def net_movement(self) -> Decimal:
        """Net effect of the day's sales on both rails and its movements."""
        return (
            self.movements.total_net_contribution
            + self.platform_rail.total_net_contribution
            + self.processor_rail.total_net_contribution
        )


__all__ = [
    "ProcessorRail",
    "PlatformRail",
    "LedgerRecord",
    "RailContribution",
    "DailyContributions",
]
