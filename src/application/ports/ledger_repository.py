"""Port for the settlement ledger store."""

from contextlib import AbstractContextManager
from datetime import date
from typing import Protocol

from src.domain.models import LedgerRecord


class LedgerRepositoryPort(Protocol):
    """Port exposing read/write access to ledger records.

    Every write method is atomic: a record is either fully stored or not at
    all.
    """

    def fetch_record(self, day: date) -> LedgerRecord | None:
        """Return the record for ``day``."""

    def fetch_previous_record(self, day: date) -> LedgerRecord | None:
        """Return the latest record strictly before ``day``."""

    def fetch_records_between(
        self,
        start: date,
        end: date,
    ) -> list[LedgerRecord]:
        """Return records within ``[start, end]`` in ascending date order."""

    def fetch_opening_record(self) -> LedgerRecord | None:
        """Return the record flagged as the opening balance."""

    def fetch_earliest_date(self) -> date | None:
        """Return the earliest ledger date."""

    def fetch_latest_date(self) -> date | None:
        """Return the latest ledger date."""

    def fetch_earliest_dirty_date(self) -> date | None:
        """Return the earliest record flagged for recalculation."""

    def insert_record(self, record: LedgerRecord) -> LedgerRecord:
        """Insert a new record and return it as stored."""

    def update_inputs(self, record: LedgerRecord) -> LedgerRecord:
        """Store same-day inputs, notes and the dirty flag of a record."""

    def save_opening_record(self, record: LedgerRecord) -> LedgerRecord:
        """Insert or replace the opening record, demoting any other one."""

    def save_derived_record(
        self,
        record: LedgerRecord,
        resume_from: date | None,
    ) -> LedgerRecord | None:
        """Store derived balances and the cascade watermark together.

        Args:
            record: Record with freshly derived balances.
            resume_from: Next date a resumed cascade must start from, or
                None when the cascade finished.

        Returns:
            LedgerRecord | None: The stored record, or None when the stored
            same-day inputs no longer match ``record``; nothing is written
            then.
        """

    def fetch_watermark(self) -> date | None:
        """Return the pending cascade resume date, if any."""

    def save_watermark(self, resume_from: date | None) -> None:
        """Set or clear the pending cascade resume date."""

    def cascade_lock(self) -> AbstractContextManager:
        """Return a context manager holding the store-wide cascade lock."""


__all__ = ["LedgerRepositoryPort"]
