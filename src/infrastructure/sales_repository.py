"""SQLAlchemy-backed repository for sales."""

from datetime import date

from sqlalchemy import select

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.sales_repository import SalesRepositoryPort
from src.domain.models import Channel, Condition, PaymentMethod, Sale
from src.domain.services.normalization import (
    normalize_optional_text,
    normalize_text,
)
from src.infrastructure.schema import sales_table
from src.utils.decimal_utils import coerce_decimal


class SqlAlchemySalesRepository(SalesRepositoryPort):
    """Repository reading sales from the back office database."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the back office engine.
        """
        self._db_port = db_port

    def fetch_sales_between(self, start: date, end: date) -> list[Sale]:
        """Return sales dated within ``[start, end]``.

        Raises:
            UnknownValueError: If a stored channel, payment method or
                condition is not recognised.
        """
        query = (
            select(sales_table)
            .where(
                sales_table.c.sale_date >= start,
                sales_table.c.sale_date <= end,
            )
            .order_by(sales_table.c.sale_date, sales_table.c.id)
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.connect() as conn:
            rows = conn.execute(query).all()
        return [self._to_sale(row) for row in rows]

    @staticmethod
    def _to_sale(row) -> Sale:
        return Sale(
            id=str(row.id),
            sale_date=row.sale_date,
            channel=Channel.parse(row.channel),
            payment_method=PaymentMethod.parse(row.payment_method),
            condition=Condition.parse(row.condition),
            quantity=row.quantity,
            product_id=row.product_id,
            gross_price=coerce_decimal(row.gross_price),
            shipping_cost=coerce_decimal(row.shipping_cost),
            product_cost=coerce_decimal(row.product_cost),
            commission=coerce_decimal(row.commission),
            tax=coerce_decimal(row.tax),
            gross_receipts_tax=coerce_decimal(row.gross_receipts_tax),
            net_price=coerce_decimal(row.net_price),
            margin=coerce_decimal(row.margin),
            buyer=normalize_text(row.buyer),
            tracking_url=normalize_optional_text(row.tracking_url),
            shipping_status=normalize_optional_text(row.shipping_status),
            courier=normalize_optional_text(row.courier),
            shipping_address=normalize_optional_text(row.shipping_address),
            external_order_id=normalize_optional_text(
                row.external_order_id
            ),
        )


__all__ = ["SqlAlchemySalesRepository"]
