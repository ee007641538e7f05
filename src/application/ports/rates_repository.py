"""Port for reading configured rates."""

from typing import Protocol

from src.domain.models import Channel, Condition, PaymentMethod, Rate


class RatesRepositoryPort(Protocol):
    """Port exposing exact-key rate lookups."""

    def fetch_rate(
        self,
        channel: Channel,
        payment_method: PaymentMethod,
        condition: Condition,
    ) -> Rate | None:
        """Return the rate matching all three keys, or None."""


__all__ = ["RatesRepositoryPort"]
