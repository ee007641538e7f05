"""Use case resolving the rate that prices a sale."""

from src.application.ports.rates_repository import RatesRepositoryPort
from src.domain.errors import RateNotFoundError
from src.domain.models import Channel, Condition, PaymentMethod, Rate
from src.infrastructure.logging.logger import get_app_logger


class ResolveRateUseCase:
    """Exact-match rate lookup with no wildcard fallback."""

    def __init__(self, rates_repository: RatesRepositoryPort, logger=None) -> None:
        """Initialize the use case.

        Args:
            rates_repository: Port providing rate rows.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._rates = rates_repository
        self._logger = logger or get_app_logger()

    def execute(self, channel, payment_method, condition=Condition.NORMAL) -> Rate:
        """Return the rate for the given key.

        Args:
            channel: Channel or raw channel value.
            payment_method: PaymentMethod or raw value.
            condition: Condition or raw value.

        Returns:
            Rate: The matching rate.

        Raises:
            RateNotFoundError: If no row matches all three keys.
            UnknownValueError: If a key cannot be normalised.
        """
        key = (
            Channel.parse(channel),
            PaymentMethod.parse(payment_method),
            Condition.parse(condition),
        )
        rate = self._rates.fetch_rate(*key)
        if rate is None:
            error = RateNotFoundError(*key)
            self._logger.error(str(error))
            raise error
        return rate


__all__ = ["ResolveRateUseCase"]
