"""Use case checking stored ledger balances against their derivation."""

from datetime import date, timedelta

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.daily_contributions import (
    GetDailyContributionsUseCase,
)
from src.domain.models import AuditReport, BalanceDrift
from src.domain.services.ledger import balance_snapshot, derive_record
from src.infrastructure.logging.logger import get_app_logger


class AuditLedgerUseCase:
    """Re-derive stored records without writing and report the drifts."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        contributions: GetDailyContributionsUseCase,
        logger=None,
    ) -> None:
        self._ledger = ledger_repository
        self._contributions = contributions
        self._logger = logger or get_app_logger()

    def execute(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> AuditReport:
        """Audit every record within ``[start, end]``.

        Each record is compared with the balances derived from its stored
        predecessor and its own date's inputs. Missing dates and records
        still flagged for recalculation are reported too.

        Args:
            start: First date to audit; the ledger's first date by default.
            end: Last date to audit; the ledger's last date by default.

        Returns:
            AuditReport: Number of records checked and the drifts found.
        """
        first = start or self._ledger.fetch_earliest_date()
        last = end or self._ledger.fetch_latest_date()
        if first is None or last is None or first > last:
            return AuditReport(checked_days=0, drifts=[])

        records = self._ledger.fetch_records_between(first, last)
        if not records:
            return AuditReport(checked_days=0, drifts=[])
        contributions = self._contributions.aggregate_range(
            records[0].ledger_date,
            records[-1].ledger_date,
        )

        previous = self._ledger.fetch_previous_record(records[0].ledger_date)
        drifts = []
        checked = 0
        for record in records:
            checked += 1
            if record.is_opening:
                previous = record
                continue
            if previous is None:
                drifts.append(
                    BalanceDrift(
                        record.ledger_date,
                        actual=balance_snapshot(record),
                        reason="no predecessor record",
                    )
                )
                previous = record
                continue
            if previous.ledger_date != record.ledger_date - timedelta(days=1):
                drifts.append(
                    BalanceDrift(
                        record.ledger_date,
                        reason=f"missing dates after {previous.ledger_date}",
                    )
                )
            expected = derive_record(
                previous,
                record,
                contributions[record.ledger_date],
            )
            if not expected.same_balances(record):
                drifts.append(
                    BalanceDrift(
                        record.ledger_date,
                        expected=balance_snapshot(expected),
                        actual=balance_snapshot(record),
                    )
                )
            elif record.needs_recalculation:
                drifts.append(
                    BalanceDrift(
                        record.ledger_date,
                        reason="flagged for recalculation",
                    )
                )
            previous = record

        for drift in drifts:
            self._logger.warning(
                f"Ledger drift on {drift.ledger_date}: {drift.reason} "
                f"{', '.join(drift.fields)}".rstrip()
            )
        self._logger.info(
            f"Audited {checked} ledger records: {len(drifts)} drift(s)"
        )
        return AuditReport(checked_days=checked, drifts=drifts)


__all__ = ["AuditLedgerUseCase"]
