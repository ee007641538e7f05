"""Use case re-deriving ledger balances from a date onwards.

The cascade walks every calendar date from the start date to the latest
known date, materialising missing dates from their predecessor. Each date
is stored in its own transaction together with the resume watermark, so a
failure leaves every earlier date consistent and a later run resumes at
the failed date.
"""

from contextlib import AbstractContextManager
import threading
from datetime import date, timedelta

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.daily_contributions import (
    GetDailyContributionsUseCase,
)
from src.domain.errors import CascadeError, LedgerError, NoPriorRecordError
from src.domain.models import CascadeResult, DailyContributions, LedgerRecord
from src.domain.services.ledger import carry_forward, derive_record
from src.domain.services.validation import validate_balance_signs
from src.infrastructure.logging.logger import get_app_logger

CASCADE_LOCK = threading.Lock()
DEFAULT_CHUNK_DAYS = 31
# Attempts to store one date while operator inputs keep changing under it.
MAX_WRITE_ATTEMPTS = 3


class RecalculateLedgerUseCase:
    """Run ledger cascades one at a time."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        contributions: GetDailyContributionsUseCase,
        *,
        chunk_days: int = DEFAULT_CHUNK_DAYS,
        lock: AbstractContextManager | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port storing ledger records.
            contributions: Aggregator of the per-day inputs.
            chunk_days: Number of dates read from the stores per batch.
            lock: In-process lock serialising cascades; a shared module
                lock is used when omitted.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        if chunk_days < 1:
            raise ValueError("chunk_days must be at least 1")
        self._ledger = ledger_repository
        self._contributions = contributions
        self._chunk_days = chunk_days
        self._lock = lock or CASCADE_LOCK
        self._logger = logger or get_app_logger()

    def recalculate_from(self, start: date) -> CascadeResult:
        """Re-derive every date from ``start`` to the latest ledger date.

        Args:
            start: First date whose inputs may have changed.

        Returns:
            CascadeResult: Summary of the run.

        Raises:
            NoPriorRecordError: If the ledger has no opening record.
            CascadeError: If the store fails; dates before
                ``failed_date`` stay persisted.
        """
        try:
            with self._lock, self._ledger.cascade_lock():
                return self._run(start)
        except LedgerError:
            raise
        except Exception as exc:
            self._logger.error(f"Ledger recalculation from {start} failed: {exc}")
            raise CascadeError(start, str(exc)) from exc

    def resume(self) -> CascadeResult | None:
        """Finish an interrupted cascade, if one is pending."""
        watermark = self._ledger.fetch_watermark()
        if watermark is None:
            self._logger.info("No interrupted ledger recalculation to resume")
            return None
        self._logger.info(f"Resuming ledger recalculation from {watermark}")
        return self.recalculate_from(watermark)

    def recalculate_dirty(self) -> CascadeResult | None:
        """Cascade from the earliest record flagged for recalculation."""
        earliest = self._ledger.fetch_earliest_dirty_date()
        if earliest is None:
            self._logger.info("No ledger records flagged for recalculation")
            return None
        return self.recalculate_from(earliest)

    def _run(self, start: date) -> CascadeResult:
        opening = self._resolve_opening(start)
        pending = self._ledger.fetch_watermark()
        effective_start = start
        if pending is not None and pending < effective_start:
            self._logger.warning(
                f"Interrupted recalculation pending from {pending}; "
                f"starting there instead of {start}"
            )
            effective_start = pending

        first = max(effective_start, opening.ledger_date + timedelta(days=1))
        latest = self._ledger.fetch_latest_date() or opening.ledger_date
        last = max(latest, start)

        if first > last:
            if pending is not None:
                self._ledger.save_watermark(None)
            self._logger.info(f"Ledger already up to date from {start}")
            return CascadeResult(start_date=first, end_date=None)

        previous = self._ledger.fetch_previous_record(first)
        if previous is None:
            raise NoPriorRecordError(first)
        if previous.ledger_date < first - timedelta(days=1):
            # Missing dates before the start still need their inputs applied.
            first = previous.ledger_date + timedelta(days=1)

        self._logger.info(f"Recalculating ledger from {first} to {last}")
        self._ledger.save_watermark(first)

        processed = written = created = 0
        chunk_start = first
        while chunk_start <= last:
            chunk_end = min(
                chunk_start + timedelta(days=self._chunk_days - 1),
                last,
            )
            try:
                contributions = self._contributions.aggregate_range(
                    chunk_start,
                    chunk_end,
                )
                stored = {
                    record.ledger_date: record
                    for record in self._ledger.fetch_records_between(
                        chunk_start,
                        chunk_end,
                    )
                }
            except LedgerError:
                raise
            except Exception as exc:
                self._logger.error(
                    f"Failed to read ledger inputs from {chunk_start}: {exc}"
                )
                raise CascadeError(chunk_start, str(exc)) from exc

            day = chunk_start
            while day <= chunk_end:
                current = stored.get(day)
                if current is None:
                    current = carry_forward(previous, day)
                    created += 1
                resume_from = day + timedelta(days=1) if day < last else None
                try:
                    previous, changed = self._derive_and_store(
                        previous,
                        current,
                        contributions[day],
                        resume_from,
                    )
                except LedgerError:
                    raise
                except Exception as exc:
                    self._logger.error(
                        f"Ledger recalculation failed at {day}: {exc}"
                    )
                    raise CascadeError(day, str(exc)) from exc
                processed += 1
                written += int(changed)
                day += timedelta(days=1)

            self._ledger.save_watermark(
                chunk_end + timedelta(days=1) if chunk_end < last else None
            )
            self._logger.debug(f"Ledger chunk {chunk_start} to {chunk_end} done")
            chunk_start = chunk_end + timedelta(days=1)

        self._logger.info(
            f"Ledger recalculated from {first} to {last}: "
            f"{processed} days, {written} written, {created} created"
        )
        return CascadeResult(
            start_date=first,
            end_date=last,
            processed_days=processed,
            written_days=written,
            created_days=created,
        )

    def _derive_and_store(
        self,
        previous: LedgerRecord,
        current: LedgerRecord,
        contributions: DailyContributions,
        resume_from: date | None,
    ) -> tuple[LedgerRecord, bool]:
        day = current.ledger_date
        for _ in range(MAX_WRITE_ATTEMPTS):
            derived = derive_record(previous, current, contributions)
            if not current.needs_recalculation and derived.same_balances(current):
                return current, False
            stored = self._ledger.save_derived_record(derived, resume_from)
            if stored is not None:
                validate_balance_signs(stored, self._logger)
                return stored, True
            self._logger.warning(
                f"Settlement inputs of {day} changed during recalculation; "
                "deriving again"
            )
            current = self._ledger.fetch_record(day) or carry_forward(
                previous,
                day,
            )
        raise CascadeError(day, "settlement inputs kept changing")

    def _resolve_opening(self, start: date) -> LedgerRecord:
        opening = self._ledger.fetch_opening_record()
        if opening is not None:
            return opening
        earliest = self._ledger.fetch_earliest_date()
        if earliest is None:
            raise NoPriorRecordError(start)
        self._logger.warning(
            f"No opening record flagged; treating {earliest} as the opening date"
        )
        return self._ledger.fetch_record(earliest)


__all__ = ["RecalculateLedgerUseCase", "CASCADE_LOCK", "DEFAULT_CHUNK_DAYS"]
