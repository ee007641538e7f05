"""SQLAlchemy-backed repository for expense and income entries."""

from datetime import date

from sqlalchemy import select

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.movements_repository import MovementsRepositoryPort
from src.domain.models import Channel, MovementEntry, MovementKind
from src.domain.services.normalization import normalize_flag, normalize_text
from src.infrastructure.schema import movements_table
from src.utils.decimal_utils import coerce_decimal


class SqlAlchemyMovementsRepository(MovementsRepositoryPort):
    """Repository reading expense/income entries."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the back office engine.
        """
        self._db_port = db_port

    def fetch_movements_between(
        self,
        start: date,
        end: date,
    ) -> list[MovementEntry]:
        query = (
            select(movements_table)
            .where(
                movements_table.c.entry_date >= start,
                movements_table.c.entry_date <= end,
            )
            .order_by(movements_table.c.entry_date, movements_table.c.id)
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.connect() as conn:
            rows = conn.execute(query).all()
        return [
            MovementEntry(
                id=str(row.id),
                entry_date=row.entry_date,
                kind=MovementKind.parse(row.kind),
                category=normalize_text(row.category),
                amount=coerce_decimal(row.amount),
                channel=Channel.parse(row.channel or Channel.GENERAL),
                is_personal=normalize_flag(row.is_personal),
                description=row.description or "",
            )
            for row in rows
        ]


__all__ = ["SqlAlchemyMovementsRepository"]
