"""Expense and income entries."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from src.domain.models.enums import Channel, MovementKind


@dataclass(frozen=True)
class MovementEntry:
    """Expense or income entry affecting the processor balance.

    Amounts are positive; ``kind`` carries the sign.
    """

    id: str
    entry_date: date
    kind: MovementKind
    category: str
    amount: Decimal
    channel: Channel = Channel.GENERAL
    is_personal: bool = False
    description: str = ""

    @property
    def is_expense(self) -> bool:
        return self.kind == MovementKind.EXPENSE


__all__ = ["MovementEntry"]
