"""SQLAlchemy-backed repository for the settlement ledger."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime

from sqlalchemy import func, insert, select, text, update
from sqlalchemy.engine import Connection

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.errors import LedgerRecordNotFoundError
from src.domain.models import LedgerRecord, PlatformRail, ProcessorRail
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.schema import (
    ledger_days_table,
    ledger_recalc_state_table,
)
from src.utils.decimal_utils import round_money

DEFAULT_ADVISORY_LOCK_KEY = 726354
WATERMARK_ROW_ID = 1

# Columns a cascade rewrites on existing records; same-day inputs and notes
# belong to the operator.
DERIVED_COLUMNS = (
    "processor_available",
    "processor_pending",
    "platform_pending",
    "needs_recalculation",
    "updated_at",
)
# Same-day inputs the derived balances were computed from.
INPUT_COLUMNS = (
    "processor_settled_today",
    "platform_settled_today",
    "platform_tax_withheld_today",
)

ADVISORY_LOCK_SQL = text("SELECT pg_advisory_lock(:key)")
ADVISORY_UNLOCK_SQL = text("SELECT pg_advisory_unlock(:key)")


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Ledger store on the back office database.

    Every write runs in its own transaction. On PostgreSQL the cascade lock
    is a session advisory lock, so cascades from separate processes are
    serialised too.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        *,
        advisory_lock_key: int = DEFAULT_ADVISORY_LOCK_KEY,
        clock: Callable[[], datetime] = datetime.now,
        logger=None,
    ) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the back office engine.
            advisory_lock_key: PostgreSQL advisory lock id for cascades.
            clock: Source of ``updated_at`` timestamps.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._advisory_lock_key = advisory_lock_key
        self._clock = clock
        self._logger = logger or get_app_logger()

    def fetch_record(self, day: date) -> LedgerRecord | None:
        query = select(ledger_days_table).where(
            ledger_days_table.c.ledger_date == day
        )
        return self._fetch_one(query)

    def fetch_previous_record(self, day: date) -> LedgerRecord | None:
        query = (
            select(ledger_days_table)
            .where(ledger_days_table.c.ledger_date < day)
            .order_by(ledger_days_table.c.ledger_date.desc())
            .limit(1)
        )
        return self._fetch_one(query)

    def fetch_records_between(
        self,
        start: date,
        end: date,
    ) -> list[LedgerRecord]:
        query = (
            select(ledger_days_table)
            .where(
                ledger_days_table.c.ledger_date >= start,
                ledger_days_table.c.ledger_date <= end,
            )
            .order_by(ledger_days_table.c.ledger_date)
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.connect() as conn:
            rows = conn.execute(query).all()
        return [self._to_record(row) for row in rows]

    def fetch_opening_record(self) -> LedgerRecord | None:
        query = (
            select(ledger_days_table)
            .where(ledger_days_table.c.is_opening.is_(True))
            .order_by(ledger_days_table.c.ledger_date)
            .limit(1)
        )
        return self._fetch_one(query)

    def fetch_earliest_date(self) -> date | None:
        return self._scalar(select(func.min(ledger_days_table.c.ledger_date)))

    def fetch_latest_date(self) -> date | None:
        return self._scalar(select(func.max(ledger_days_table.c.ledger_date)))

    def fetch_earliest_dirty_date(self) -> date | None:
        query = select(func.min(ledger_days_table.c.ledger_date)).where(
            ledger_days_table.c.needs_recalculation.is_(True)
        )
        return self._scalar(query)

    def insert_record(self, record: LedgerRecord) -> LedgerRecord:
        stored = replace(record, updated_at=self._clock())
        engine = self._db_port.get_backoffice_engine()
        with engine.begin() as conn:
            conn.execute(
                insert(ledger_days_table).values(**self._to_values(stored))
            )
        return stored

    def update_inputs(self, record: LedgerRecord) -> LedgerRecord:
        """Store same-day inputs, notes and the dirty flag of a record.

        Raises:
            LedgerRecordNotFoundError: If the date has no record.
        """
        stored = replace(record, updated_at=self._clock())
        statement = (
            update(ledger_days_table)
            .where(ledger_days_table.c.ledger_date == record.ledger_date)
            .values(
                processor_settled_today=round_money(
                    record.processor.settled_today
                ),
                platform_settled_today=round_money(record.platform.settled_today),
                platform_tax_withheld_today=round_money(
                    record.platform.tax_withheld_today
                ),
                notes=record.notes,
                needs_recalculation=record.needs_recalculation,
                updated_at=stored.updated_at,
            )
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.begin() as conn:
            result = conn.execute(statement)
        if result.rowcount == 0:
            raise LedgerRecordNotFoundError(record.ledger_date)
        return stored

    def save_opening_record(self, record: LedgerRecord) -> LedgerRecord:
        stored = replace(
            record,
            is_opening=True,
            needs_recalculation=False,
            updated_at=self._clock(),
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.begin() as conn:
            conn.execute(
                update(ledger_days_table)
                .where(
                    ledger_days_table.c.is_opening.is_(True),
                    ledger_days_table.c.ledger_date != record.ledger_date,
                )
                .values(is_opening=False)
            )
            self._upsert(conn, stored)
        return stored

    def save_derived_record(
        self,
        record: LedgerRecord,
        resume_from: date | None,
    ) -> LedgerRecord | None:
        """Store derived balances unless the same-day inputs changed meanwhile.

        The update only matches when the stored settled and withheld values
        are the ones the balances were derived from. A missing date is
        inserted whole.
        """
        stored = replace(record, updated_at=self._clock())
        values = self._to_values(stored)
        table = ledger_days_table
        statement = (
            update(table)
            .where(
                table.c.ledger_date == record.ledger_date,
                *(table.c[name] == values[name] for name in INPUT_COLUMNS),
            )
            .values(**{name: values[name] for name in DERIVED_COLUMNS})
        )
        engine = self._db_port.get_backoffice_engine()
        with engine.begin() as conn:
            result = conn.execute(statement)
            if result.rowcount == 0:
                exists = conn.execute(
                    select(table.c.ledger_date).where(
                        table.c.ledger_date == record.ledger_date
                    )
                ).first()
                if exists is not None:
                    self._logger.debug(
                        f"Inputs of {record.ledger_date} changed; "
                        "derived balances not stored"
                    )
                    return None
                conn.execute(insert(table).values(**values))
            self._write_watermark(conn, resume_from)
        return stored

    def fetch_watermark(self) -> date | None:
        query = select(ledger_recalc_state_table.c.resume_from).where(
            ledger_recalc_state_table.c.id == WATERMARK_ROW_ID
        )
        return self._scalar(query)

    def save_watermark(self, resume_from: date | None) -> None:
        engine = self._db_port.get_backoffice_engine()
        with engine.begin() as conn:
            self._write_watermark(conn, resume_from)

    @contextmanager
    def cascade_lock(self) -> Iterator[None]:
        """Hold the cross-process cascade lock on PostgreSQL.

        Other databases rely on the in-process lock only.
        """
        engine = self._db_port.get_backoffice_engine()
        if engine.dialect.name != "postgresql":
            yield
            return
        params = {"key": self._advisory_lock_key}
        with engine.connect() as conn:
            self._logger.debug(
                f"Waiting for ledger advisory lock {self._advisory_lock_key}"
            )
            conn.execute(ADVISORY_LOCK_SQL, params)
            conn.commit()
            try:
                yield
            finally:
                conn.execute(ADVISORY_UNLOCK_SQL, params)
                conn.commit()

    def _fetch_one(self, query) -> LedgerRecord | None:
        engine = self._db_port.get_backoffice_engine()
        with engine.connect() as conn:
            row = conn.execute(query).first()
        if row is None:
            return None
        return self._to_record(row)

    def _scalar(self, query):
        engine = self._db_port.get_backoffice_engine()
        with engine.connect() as conn:
            return conn.execute(query).scalar()

    def _upsert(self, conn: Connection, record: LedgerRecord) -> None:
        values = self._to_values(record)
        result = conn.execute(
            update(ledger_days_table)
            .where(ledger_days_table.c.ledger_date == record.ledger_date)
            .values(**values)
        )
        if result.rowcount == 0:
            conn.execute(insert(ledger_days_table).values(**values))

    def _write_watermark(self, conn: Connection, resume_from: date | None) -> None:
        values = {"resume_from": resume_from, "updated_at": self._clock()}
        result = conn.execute(
            update(ledger_recalc_state_table)
            .where(ledger_recalc_state_table.c.id == WATERMARK_ROW_ID)
            .values(**values)
        )
        if result.rowcount == 0:
            conn.execute(
                insert(ledger_recalc_state_table).values(
                    id=WATERMARK_ROW_ID,
                    **values,
                )
            )

    @staticmethod
    def _to_values(record: LedgerRecord) -> dict:
        return {
            "ledger_date": record.ledger_date,
            "processor_available": round_money(record.processor.available),
            "processor_pending": round_money(
                record.processor.pending_settlement
            ),
            "processor_settled_today": round_money(
                record.processor.settled_today
            ),
            "platform_pending": round_money(record.platform.pending_settlement),
            "platform_settled_today": round_money(record.platform.settled_today),
            "platform_tax_withheld_today": round_money(
                record.platform.tax_withheld_today
            ),
            "notes": record.notes or "",
            "is_opening": record.is_opening,
            "needs_recalculation": record.needs_recalculation,
            "updated_at": record.updated_at,
        }

    @staticmethod
    def _to_record(row) -> LedgerRecord:
        return LedgerRecord(
            ledger_date=row.ledger_date,
            processor=ProcessorRail(
                available=round_money(row.processor_available),
                pending_settlement=round_money(row.processor_pending),
                settled_today=round_money(row.processor_settled_today),
            ),
            platform=PlatformRail(
                pending_settlement=round_money(row.platform_pending),
                settled_today=round_money(row.platform_settled_today),
                tax_withheld_today=round_money(row.platform_tax_withheld_today),
            ),
            notes=row.notes or "",
            is_opening=bool(row.is_opening),
            needs_recalculation=bool(row.needs_recalculation),
            updated_at=row.updated_at,
        )


__all__ = ["SqlAlchemyLedgerRepository", "DEFAULT_ADVISORY_LOCK_KEY"]
