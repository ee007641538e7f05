"""Change notifications feeding ledger recalculations.

Sales and expense/income writes report their changes to
``LedgerChangeHandler``, which decides whether the ledger is affected and
publishes ``LedgerInputChanged`` events. ``LedgerRecalculationWorker``
consumes those events on a single thread, so cascades never run inside the
request that triggered them.
"""

import queue
import threading
from collections.abc import Callable

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.use_cases.recalculate_ledger import (
    RecalculateLedgerUseCase,
)
from src.domain.errors import NoPriorRecordError
from src.domain.models import (
    CascadeResult,
    ChangeOperation,
    LedgerInputChanged,
    MovementEntry,
    RecalculationPlan,
    Sale,
)
from src.domain.services.recalculation_planner import (
    plan_movement_recalculation,
    plan_sale_recalculation,
)
from src.infrastructure.logging.logger import get_app_logger


class LedgerRecalculationWorker:
    """Queue of pending cascades served by one background thread.

    Events waiting in the queue are coalesced: a batch runs one cascade
    from the earliest requested date. A failed batch is queued again from
    that date and the thread waits ``retry_delay`` seconds before serving
    it.
    """

    def __init__(
        self,
        recalculate: RecalculateLedgerUseCase,
        *,
        poll_interval: float = 0.5,
        retry_delay: float = 5.0,
        logger=None,
    ) -> None:
        self._recalculate = recalculate
        self._poll_interval = poll_interval
        self._retry_delay = retry_delay
        self._logger = logger or get_app_logger()
        self._queue: queue.Queue[LedgerInputChanged] = queue.Queue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def submit(self, event: LedgerInputChanged) -> None:
        """Enqueue a change event."""
        self._logger.debug(
            f"Ledger change queued from {event.from_date}: {event.reason}"
        )
        self._queue.put(event)

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self) -> CascadeResult | None:
        """Process every queued event on the calling thread.

        Returns:
            CascadeResult | None: Result of the coalesced cascade, or None
            when the queue was empty.

        Raises:
            LedgerError: If the cascade fails; the batch stays queued
                unless the ledger has no opening record.
        """
        events = self._take_pending()
        if not events:
            return None
        return self._process(events)

    def start(self) -> None:
        """Start the background thread if it is not running."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._serve,
            name="ledger-recalculation",
            daemon=True,
        )
        self._thread.start()
        self._logger.info("Ledger recalculation worker started")

    def stop(self, timeout: float | None = None) -> None:
        """Ask the background thread to finish and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._logger.info("Ledger recalculation worker stopped")

    def _serve(self) -> None:
        while not self._stop_event.is_set():
            try:
                first = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            events = [first, *self._take_pending()]
            try:
                self._process(events)
            except Exception as exc:
                self._logger.error(f"Background ledger recalculation failed: {exc}")
                self._stop_event.wait(self._retry_delay)

    def _take_pending(self) -> list[LedgerInputChanged]:
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def _process(self, events: list[LedgerInputChanged]) -> CascadeResult:
        from_date = min(event.from_date for event in events)
        self._logger.info(
            f"Recalculating ledger from {from_date} for {len(events)} change(s)"
        )
        try:
            return self._recalculate.recalculate_from(from_date)
        except NoPriorRecordError:
            # Establishing the opening balance cascades on its own.
            raise
        except Exception:
            self._queue.put(
                LedgerInputChanged(from_date, "retry after failed recalculation")
            )
            raise


class LedgerChangeHandler:
    """Translate sale and movement mutations into ledger change events."""

    def __init__(
        self,
        publish: Callable[[LedgerInputChanged], None],
        ledger_repository: LedgerRepositoryPort | None = None,
        logger=None,
    ) -> None:
        """Initialize the handler.

        Args:
            publish: Callback receiving change events, usually
                ``LedgerRecalculationWorker.submit``.
            ledger_repository: Used to find the opening date when a change
                carries no usable date.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._publish = publish
        self._ledger = ledger_repository
        self._logger = logger or get_app_logger()

    def on_sale_changed(
        self,
        sale: Sale,
        previous_sale: Sale | None = None,
        operation=ChangeOperation.UPDATE,
    ) -> RecalculationPlan | None:
        """Handle a sale write.

        Args:
            sale: The sale as stored after the write; the deleted sale on
                delete.
            previous_sale: The sale before an update.
            operation: ChangeOperation or raw value.

        Returns:
            RecalculationPlan | None: The published plan, None when the
            change does not affect the ledger.
        """
        original, updated = _before_after(sale, previous_sale, operation)
        return self._handle(
            lambda: plan_sale_recalculation(original, updated, operation),
            f"sale {getattr(sale, 'id', '?')}",
        )

    def on_movement_changed(
        self,
        entry: MovementEntry,
        previous_entry: MovementEntry | None = None,
        operation=ChangeOperation.UPDATE,
    ) -> RecalculationPlan | None:
        """Handle an expense or income write."""
        original, updated = _before_after(entry, previous_entry, operation)
        return self._handle(
            lambda: plan_movement_recalculation(original, updated, operation),
            f"movement {getattr(entry, 'id', '?')}",
        )

    def _handle(self, plan_change, label: str) -> RecalculationPlan | None:
        try:
            plan = plan_change()
        except ValueError as exc:
            plan = self._fallback_plan(label, exc)
        if plan is None:
            self._logger.debug(f"{label}: cosmetic change, ledger untouched")
            return None
        self._logger.info(
            f"{label}: ledger recalculation from {plan.from_date} ({plan.reason})"
        )
        self._publish(LedgerInputChanged(plan.from_date, f"{label}: {plan.reason}"))
        return plan

    def _fallback_plan(self, label: str, exc: Exception) -> RecalculationPlan:
        if self._ledger is None:
            raise exc
        earliest = self._ledger.fetch_earliest_date()
        if earliest is None:
            raise exc
        self._logger.warning(
            f"{label}: {exc}; recalculating the whole ledger from {earliest}"
        )
        return RecalculationPlan(earliest, "change without a usable date")


def _before_after(record, previous, operation):
    try:
        parsed = ChangeOperation.parse(operation)
    except ValueError:
        parsed = None
    if parsed == ChangeOperation.CREATE:
        return None, record
    if parsed == ChangeOperation.DELETE:
        return record, None
    return previous, record


__all__ = ["LedgerRecalculationWorker", "LedgerChangeHandler"]
