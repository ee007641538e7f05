"""Tests for the ledger derivation rules."""

from datetime import date
from decimal import Decimal

from src.domain.models import (
    DailyContributions,
    LedgerRecord,
    PlatformRail,
    ProcessorRail,
    RailContribution,
)
from src.domain.services.ledger import (
    balance_snapshot,
    carry_forward,
    derive_record,
)


def _previous() -> LedgerRecord:
    return LedgerRecord(
        ledger_date=date(2025, 9, 1),
        processor=ProcessorRail(
            available=Decimal("1000.00"),
            pending_settlement=Decimal("500.00"),
            settled_today=Decimal("75.00"),
        ),
        platform=PlatformRail(
            pending_settlement=Decimal("800.00"),
            settled_today=Decimal("10.00"),
        ),
    )


def test_carry_forward_copies_balances_without_same_day_activity() -> None:
    """A gap day keeps the balances and starts with zero inputs."""
    record = carry_forward(_previous(), date(2025, 9, 2))

    assert record.ledger_date == date(2025, 9, 2)
    assert record.processor.available == Decimal("1000.00")
    assert record.processor.pending_settlement == Decimal("500.00")
    assert record.processor.settled_today == Decimal("0")
    assert record.platform.pending_settlement == Decimal("800.00")
    assert record.platform.settled_today == Decimal("0")
    assert record.needs_recalculation is True
    assert record.is_opening is False


def test_derive_record_applies_balance_equations() -> None:
    """The three running balances follow the continuity equations."""
    current = LedgerRecord(
        ledger_date=date(2025, 9, 2),
        processor=ProcessorRail(settled_today=Decimal("200.00")),
        platform=PlatformRail(
            settled_today=Decimal("300.00"),
            tax_withheld_today=Decimal("10.00"),
        ),
        notes="settled",
        needs_recalculation=True,
    )
    contributions = DailyContributions(
        day=date(2025, 9, 2),
        platform_rail=RailContribution(total_net_contribution=Decimal("100")),
        processor_rail=RailContribution(total_net_contribution=Decimal("50")),
        movements=RailContribution(total_net_contribution=Decimal("-40")),
    )

    derived = derive_record(_previous(), current, contributions)

    assert derived.processor.available == Decimal("1450.00")
    assert derived.processor.pending_settlement == Decimal("350.00")
    assert derived.platform.pending_settlement == Decimal("600.00")
    assert derived.processor.settled_today == Decimal("200.00")
    assert derived.notes == "settled"
    assert derived.needs_recalculation is False


def test_record_derived_figures() -> None:
    """Totals are computed, never stored."""
    record = LedgerRecord(
        ledger_date=date(2025, 9, 2),
        processor=ProcessorRail(
            available=Decimal("100"),
            pending_settlement=Decimal("20"),
            settled_today=Decimal("5"),
        ),
        platform=PlatformRail(
            pending_settlement=Decimal("30"),
            settled_today=Decimal("12"),
            tax_withheld_today=Decimal("2"),
        ),
    )

    assert record.platform_transfer_net == Decimal("10")
    assert record.processor_total == Decimal("120")
    assert record.total_available == Decimal("130")
    assert balance_snapshot(record) == {
        "processor.available": Decimal("100"),
        "processor.pending_settlement": Decimal("20"),
        "platform.pending_settlement": Decimal("30"),
    }
