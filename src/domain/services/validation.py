"""Domain validation helpers."""

from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.errors import LedgerInputError
from src.domain.models import LedgerRecord


def validate_settlement_inputs(
    day: date,
    processor_settled_today: Decimal,
    platform_settled_today: Decimal,
    tax_withheld_today: Decimal,
) -> None:
    """Reject negative or inconsistent same-day settlement inputs.

    Args:
        day: Ledger date receiving the inputs.
        processor_settled_today: Amount released by the processor.
        platform_settled_today: Amount transferred by the platform.
        tax_withheld_today: IIBB withheld during the platform transfer.

    Raises:
        LedgerInputError: If any amount is negative or the withheld tax
            exceeds the platform transfer.
    """
    named = {
        "processor settled today": processor_settled_today,
        "platform settled today": platform_settled_today,
        "tax withheld today": tax_withheld_today,
    }
    for label, amount in named.items():
        if amount < 0:
            raise LedgerInputError(day, f"{label} is negative ({amount})")
    if tax_withheld_today > platform_settled_today:
        raise LedgerInputError(
            day,
            f"tax withheld ({tax_withheld_today}) exceeds platform "
            f"transfer ({platform_settled_today})",
        )


def validate_balance_signs(record: LedgerRecord, logger: Logger) -> None:
    """Warn when derived pending balances turn negative.

    A negative pending balance means more was settled than was ever earned,
    usually a settlement typed on the wrong date.
    """
    if record.processor.pending_settlement < 0:
        logger.warning(
            f"Processor pending balance is negative on "
            f"{record.ledger_date}: {record.processor.pending_settlement}"
        )
    if record.platform.pending_settlement < 0:
        logger.warning(
            f"Platform pending balance is negative on "
            f"{record.ledger_date}: {record.platform.pending_settlement}"
        )


__all__ = ["validate_settlement_inputs", "validate_balance_signs"]
