"""Settlement ledger derivation rules.

For every date D with predecessor P::

    processor.available[D] = P.processor.available
                             + D.processor.settled_today
                             + (D.platform.settled_today
                                - D.platform.tax_withheld_today)
                             + movements[D]
    platform.pending[D]    = P.platform.pending + platform_rail[D]
                             - D.platform.settled_today
    processor.pending[D]   = P.processor.pending + processor_rail[D]
                             - D.processor.settled_today
"""

from dataclasses import replace
from datetime import date

from src.domain.models import (
    DailyContributions,
    LedgerRecord,
    PlatformRail,
    ProcessorRail,
)
from src.utils.decimal_utils import round_money


def carry_forward(previous: LedgerRecord, day: date) -> LedgerRecord:
    """Create the record for ``day`` from its predecessor's balances.

    Same-day inputs start at zero and the record is flagged for
    recalculation, since the day's sales are not reflected yet.
    """
    return LedgerRecord(
        ledger_date=day,
        processor=ProcessorRail(
            available=previous.processor.available,
            pending_settlement=previous.processor.pending_settlement,
        ),
        platform=PlatformRail(
            pending_settlement=previous.platform.pending_settlement,
        ),
        needs_recalculation=True,
    )


def derive_record(
    previous: LedgerRecord,
    current: LedgerRecord,
    contributions: DailyContributions,
) -> LedgerRecord:
    """Re-derive ``current``'s running balances.

    Args:
        previous: Record of the immediately preceding date.
        current: Stored record holding the day's manual inputs.
        contributions: Aggregates for the current date.

    Returns:
        LedgerRecord: Copy of ``current`` with fresh balances and the dirty
        flag cleared.
    """
    processor_settled = current.processor.settled_today
    platform_settled = current.platform.settled_today
    available = round_money(
        previous.processor.available
        + processor_settled
        + current.platform_transfer_net
        + contributions.movements.total_net_contribution
    )
    processor_pending = round_money(
        previous.processor.pending_settlement
        + contributions.processor_rail.total_net_contribution
        - processor_settled
    )
    platform_pending = round_money(
        previous.platform.pending_settlement
        + contributions.platform_rail.total_net_contribution
        - platform_settled
    )
    return replace(
        current,
        processor=replace(
            current.processor,
            available=available,
            pending_settlement=processor_pending,
        ),
        platform=replace(
            current.platform,
            pending_settlement=platform_pending,
        ),
        needs_recalculation=False,
    )


def balance_snapshot(record: LedgerRecord) -> dict:
    """Return the derived balances keyed by logical column name."""
    return {
        "processor.available": record.processor.available,
        "processor.pending_settlement": record.processor.pending_settlement,
        "platform.pending_settlement": record.platform.pending_settlement,
    }


__all__ = ["carry_forward", "derive_record", "balance_snapshot"]
