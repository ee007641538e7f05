"""Use case managing ledger records and their manual same-day inputs.

Manual inputs never touch derived balances directly: they mark the record
for recalculation and announce the change, and the cascade re-derives the
balances from that date onwards.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import date, timedelta

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.errors import (
    LedgerRecordNotFoundError,
    NoPriorRecordError,
    OpeningBalanceError,
)
from src.domain.models import (
    LedgerInputChanged,
    LedgerRecord,
    PlatformRail,
    ProcessorRail,
)
from src.domain.services.ledger import carry_forward
from src.domain.services.validation import validate_settlement_inputs
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import round_money


class SettlementLedgerUseCase:
    """Create, read and edit ledger records."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        on_change: Callable[[LedgerInputChanged], None] | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port storing ledger records.
            on_change: Callback receiving LedgerInputChanged events after
                a successful write.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._ledger = ledger_repository
        self._on_change = on_change
        self._logger = logger or get_app_logger()

    def read(self, day: date) -> LedgerRecord:
        """Return the stored record for ``day``.

        Raises:
            LedgerRecordNotFoundError: If the date has no record.
        """
        record = self._ledger.fetch_record(day)
        if record is None:
            raise LedgerRecordNotFoundError(day)
        return record

    def get_or_create(self, day: date) -> LedgerRecord:
        """Return the record for ``day``, carrying the predecessor forward.

        A created record copies the predecessor's balances, starts with
        zero same-day inputs and is flagged for recalculation.

        Raises:
            NoPriorRecordError: If no record exists before ``day``.
        """
        existing = self._ledger.fetch_record(day)
        if existing is not None:
            return existing
        previous = self._ledger.fetch_previous_record(day)
        if previous is None:
            raise NoPriorRecordError(day)
        created = self._ledger.insert_record(carry_forward(previous, day))
        self._logger.info(
            f"Created ledger record for {day} from {previous.ledger_date}"
        )
        return created

    def apply_same_day_inputs(
        self,
        day: date,
        processor_settled_today,
        platform_settled_today,
        tax_withheld_today,
        notes: str | None = None,
    ) -> LedgerRecord:
        """Store the manual settlement amounts of ``day``.

        Args:
            day: Ledger date receiving the inputs.
            processor_settled_today: Amount released by the processor.
            platform_settled_today: Amount transferred by the platform.
            tax_withheld_today: IIBB withheld from the platform transfer.
            notes: Optional free-text notes; kept unchanged when None.

        Returns:
            LedgerRecord: The stored record, flagged for recalculation.

        Raises:
            LedgerInputError: If the amounts are invalid.
            OpeningBalanceError: If ``day`` is the opening date.
            NoPriorRecordError: If no record exists at or before ``day``.
        """
        processor_settled = round_money(processor_settled_today)
        platform_settled = round_money(platform_settled_today)
        tax_withheld = round_money(tax_withheld_today)
        validate_settlement_inputs(
            day,
            processor_settled,
            platform_settled,
            tax_withheld,
        )

        record = self.get_or_create(day)
        if record.is_opening:
            raise OpeningBalanceError(
                day,
                "the opening record is immutable; "
                "establish a new opening balance instead",
            )

        updated = replace(
            record,
            processor=replace(
                record.processor,
                settled_today=processor_settled,
            ),
            platform=replace(
                record.platform,
                settled_today=platform_settled,
                tax_withheld_today=tax_withheld,
            ),
            notes=record.notes if notes is None else notes,
            needs_recalculation=True,
        )
        stored = self._ledger.update_inputs(updated)
        self._logger.info(
            f"Stored settlement inputs for {day}: processor={processor_settled}, "
            f"platform={platform_settled}, withheld={tax_withheld}"
        )
        self._publish(LedgerInputChanged(day, "settlement inputs updated"))
        return stored

    def establish_opening_balance(
        self,
        day: date,
        processor_available,
        processor_pending,
        platform_pending,
        notes: str = "",
    ) -> LedgerRecord:
        """Store the operator-entered starting balances on ``day``.

        Records after ``day`` are re-derived from the new opening balances.

        Raises:
            OpeningBalanceError: If a record exists before ``day``.
        """
        earliest = self._ledger.fetch_earliest_date()
        if earliest is not None and earliest < day:
            raise OpeningBalanceError(
                day,
                f"records already exist from {earliest}; "
                "the opening date must be the first ledger date",
            )

        record = LedgerRecord(
            ledger_date=day,
            processor=ProcessorRail(
                available=round_money(processor_available),
                pending_settlement=round_money(processor_pending),
            ),
            platform=PlatformRail(
                pending_settlement=round_money(platform_pending),
            ),
            notes=notes,
            is_opening=True,
        )
        stored = self._ledger.save_opening_record(record)
        self._logger.info(
            f"Opening balance established on {day}: "
            f"available={stored.processor.available}, "
            f"processor pending={stored.processor.pending_settlement}, "
            f"platform pending={stored.platform.pending_settlement}"
        )
        latest = self._ledger.fetch_latest_date()
        if latest is not None and latest > day:
            self._publish(
                LedgerInputChanged(day + timedelta(days=1), "opening balance")
            )
        return stored

    def _publish(self, event: LedgerInputChanged) -> None:
        if self._on_change is None:
            return
        self._on_change(event)


__all__ = ["SettlementLedgerUseCase"]
