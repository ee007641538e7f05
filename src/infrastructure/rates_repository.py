"""SQLAlchemy-backed repository for rate rows."""

from sqlalchemy import select

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.rates_repository import RatesRepositoryPort
from src.domain.models import Channel, Condition, PaymentMethod, Rate
from src.infrastructure.schema import rates_table
from src.utils.decimal_utils import coerce_decimal


class SqlAlchemyRatesRepository(RatesRepositoryPort):
    """Repository backed by SQLAlchemy for the rates table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the back office engine.
        """
        self._db_port = db_port

    def fetch_rate(
        self,
        channel: Channel,
        payment_method: PaymentMethod,
        condition: Condition,
    ) -> Rate | None:
        """Return the rate matching all three keys exactly."""
        query = select(rates_table).where(
            rates_table.c.channel == channel.value,
            rates_table.c.payment_method == payment_method.value,
            rates_table.c.condition == condition.value,
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.connect() as conn:
            row = conn.execute(query).first()
        if row is None:
            return None
        return Rate(
            channel=channel,
            payment_method=payment_method,
            condition=condition,
            commission_pct=coerce_decimal(row.commission_pct),
            fixed_fee=coerce_decimal(row.fixed_fee),
            discount_pct=coerce_decimal(row.discount_pct),
            extra_commission_pct=coerce_decimal(row.extra_commission_pct),
            gross_receipts_pct=coerce_decimal(row.gross_receipts_pct),
        )


__all__ = ["SqlAlchemyRatesRepository"]
