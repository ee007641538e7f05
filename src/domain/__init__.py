"""Domain package for settlement rules and core models."""

from .constants import (
    DEFAULT_GROSS_RECEIPTS_RATE,
    DEFAULT_VAT_RATE,
    storefront_commission_multiplier,
)
from .errors import (
    CascadeError,
    LedgerError,
    LedgerInputError,
    LedgerRecordNotFoundError,
    NoPriorRecordError,
    OpeningBalanceError,
    RateNotFoundError,
    UnknownValueError,
)

__all__ = [
    "DEFAULT_GROSS_RECEIPTS_RATE",
    "DEFAULT_VAT_RATE",
    "storefront_commission_multiplier",
    "CascadeError",
    "LedgerError",
    "LedgerInputError",
    "LedgerRecordNotFoundError",
    "NoPriorRecordError",
    "OpeningBalanceError",
    "RateNotFoundError",
    "UnknownValueError",
]
