"""Domain exceptions for pricing and settlement ledger operations."""

from datetime import date


class LedgerError(Exception):
    """Base class for settlement ledger failures."""


class UnknownValueError(ValueError):
    """Raised when a raw value cannot be normalised to a domain enum."""

    def __init__(self, kind: str, value) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Unknown {kind}: {value!r}")


class RateNotFoundError(LedgerError):
    """No rate row matches the (channel, payment method, condition) key."""

    def __init__(self, channel, payment_method, condition) -> None:
        self.channel = channel
        self.payment_method = payment_method
        self.condition = condition
        super().__init__(
            "No rate configured for "
            f"{_label(channel)}/{_label(payment_method)}/{_label(condition)}"
        )


class NoPriorRecordError(LedgerError):
    """No ledger record exists at or before the requested date."""

    def __init__(self, day: date) -> None:
        self.day = day
        super().__init__(
            f"No ledger record at or before {day.isoformat()}; "
            "establish an opening balance first"
        )


class LedgerRecordNotFoundError(LedgerError):
    """The ledger has no record for the requested date."""

    def __init__(self, day: date) -> None:
        self.day = day
        super().__init__(f"No ledger record for {day.isoformat()}")


class OpeningBalanceError(LedgerError):
    """The opening balance cannot be established or modified."""

    def __init__(self, day: date, reason: str) -> None:
        self.day = day
        self.reason = reason
        super().__init__(f"Opening balance {day.isoformat()}: {reason}")


class LedgerInputError(LedgerError):
    """Invalid same-day settlement inputs."""

    def __init__(self, day: date, reason: str) -> None:
        self.day = day
        self.reason = reason
        super().__init__(f"Invalid settlement input for {day.isoformat()}: {reason}")


class CascadeError(LedgerError):
    """A cascade stopped at ``failed_date``; earlier dates are persisted."""

    def __init__(self, failed_date: date, reason: str) -> None:
        self.failed_date = failed_date
        self.reason = reason
        super().__init__(
            f"Ledger recalculation failed at {failed_date.isoformat()}: {reason}"
        )


def _label(value) -> str:
    return str(getattr(value, "value", value))


__all__ = [
    "LedgerError",
    "UnknownValueError",
    "RateNotFoundError",
    "NoPriorRecordError",
    "LedgerRecordNotFoundError",
    "OpeningBalanceError",
    "LedgerInputError",
    "CascadeError",
]
