"""Tests for the ledger change handler and recalculation worker."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
import threading
import time
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.ledger_events import (
    LedgerChangeHandler,
    LedgerRecalculationWorker,
)
from src.domain.errors import CascadeError, NoPriorRecordError
from src.domain.models import CascadeResult, LedgerInputChanged

from factories import make_entry, make_sale

SALE = make_sale("s9", date(2025, 9, 5), "ML", "MercadoPago", 1000, buyer="Ana")


def _worker(recalculate=None) -> LedgerRecalculationWorker:
    return LedgerRecalculationWorker(
        recalculate or MagicMock(),
        poll_interval=0.01,
        retry_delay=0.01,
        logger=MagicMock(),
    )


def test_drain_coalesces_to_the_earliest_date() -> None:
    recalculate = MagicMock()
    recalculate.recalculate_from.return_value = CascadeResult(
        date(2025, 9, 3),
        date(2025, 9, 9),
    )
    worker = _worker(recalculate)
    worker.submit(LedgerInputChanged(date(2025, 9, 5), "sale"))
    worker.submit(LedgerInputChanged(date(2025, 9, 3), "expense"))
    worker.submit(LedgerInputChanged(date(2025, 9, 5), "sale again"))

    result = worker.drain()

    recalculate.recalculate_from.assert_called_once_with(date(2025, 9, 3))
    assert result.start_date == date(2025, 9, 3)
    assert worker.pending() == 0


def test_drain_with_empty_queue_does_nothing() -> None:
    recalculate = MagicMock()

    assert _worker(recalculate).drain() is None
    recalculate.recalculate_from.assert_not_called()


def test_drain_propagates_cascade_errors() -> None:
    recalculate = MagicMock()
    recalculate.recalculate_from.side_effect = CascadeError(
        date(2025, 9, 4),
        "store unavailable",
    )
    worker = _worker(recalculate)
    worker.submit(LedgerInputChanged(date(2025, 9, 4), "sale"))

    with pytest.raises(CascadeError):
        worker.drain()

    assert worker.pending() == 1


def test_failed_drain_is_retried_from_the_same_date() -> None:
    recalculate = MagicMock()
    recalculate.recalculate_from.side_effect = [
        CascadeError(date(2025, 9, 4), "store unavailable"),
        CascadeResult(date(2025, 9, 4), date(2025, 9, 9)),
    ]
    worker = _worker(recalculate)
    worker.submit(LedgerInputChanged(date(2025, 9, 6), "sale"))
    worker.submit(LedgerInputChanged(date(2025, 9, 4), "expense"))

    with pytest.raises(CascadeError):
        worker.drain()
    worker.submit(LedgerInputChanged(date(2025, 9, 8), "later sale"))
    result = worker.drain()

    assert recalculate.recalculate_from.call_args_list[-1].args == (
        date(2025, 9, 4),
    )
    assert result.end_date == date(2025, 9, 9)
    assert worker.pending() == 0


def test_missing_opening_balance_is_not_retried() -> None:
    recalculate = MagicMock()
    recalculate.recalculate_from.side_effect = NoPriorRecordError(
        date(2025, 9, 4)
    )
    worker = _worker(recalculate)
    worker.submit(LedgerInputChanged(date(2025, 9, 4), "sale"))

    with pytest.raises(NoPriorRecordError):
        worker.drain()

    assert worker.pending() == 0


@pytest.mark.parametrize(
    "failure",
    [CascadeError(date(2025, 9, 4), "store unavailable"), OSError("disk full")],
)
def test_background_thread_retries_failed_batches(failure) -> None:
    """A failed cascade is logged, the thread stays up and retries it."""
    done = threading.Event()
    calls = []

    def _recalculate(from_date):
        calls.append(from_date)
        if len(calls) == 1:
            raise failure
        done.set()

    recalculate = MagicMock()
    recalculate.recalculate_from.side_effect = _recalculate
    worker = _worker(recalculate)

    worker.start()
    worker.submit(LedgerInputChanged(date(2025, 9, 4), "first"))
    assert done.wait(timeout=5)
    worker.stop(timeout=5)

    assert calls[:2] == [date(2025, 9, 4), date(2025, 9, 4)]
    assert worker._thread is None


def test_background_thread_serves_events_after_a_failure() -> None:
    served = threading.Event()
    calls = []

    def _recalculate(from_date):
        calls.append(from_date)
        if len(calls) == 1:
            raise RuntimeError("connection reset")
        if from_date == date(2025, 9, 2):
            served.set()

    recalculate = MagicMock()
    recalculate.recalculate_from.side_effect = _recalculate
    worker = _worker(recalculate)

    worker.start()
    worker.submit(LedgerInputChanged(date(2025, 9, 4), "first"))
    while not calls:
        time.sleep(0.01)
    worker.submit(LedgerInputChanged(date(2025, 9, 2), "second"))
    assert served.wait(timeout=5)
    worker.stop(timeout=5)

    assert calls[0] == date(2025, 9, 4)
    assert date(2025, 9, 2) in calls

def test_cosmetic_sale_edit_publishes_nothing() -> None:
    published = []
    handler = LedgerChangeHandler(published.append, logger=MagicMock())

    plan = handler.on_sale_changed(
        replace(SALE, buyer="Beatriz", tracking_url="https://t.example/1"),
        SALE,
        "update",
    )

    assert plan is None
    assert published == []


def test_financial_sale_edit_publishes_earliest_date() -> None:
    published = []
    handler = LedgerChangeHandler(published.append, logger=MagicMock())
    moved = replace(SALE, sale_date=date(2025, 9, 2))

    plan = handler.on_sale_changed(moved, SALE, "update")

    assert plan.from_date == date(2025, 9, 2)
    assert published[0].from_date == date(2025, 9, 2)
    assert "sale s9" in published[0].reason


def test_created_and_deleted_records_cascade_from_their_date() -> None:
    published = []
    handler = LedgerChangeHandler(published.append, logger=MagicMock())
    entry = make_entry("e1", date(2025, 9, 7), "Gasto", Decimal("10"))

    handler.on_movement_changed(entry, operation="create")
    handler.on_movement_changed(entry, operation="delete")

    assert [event.from_date for event in published] == [
        date(2025, 9, 7),
        date(2025, 9, 7),
    ]


def test_change_without_date_falls_back_to_ledger_start() -> None:
    """Uncertain changes recalculate everything instead of skipping."""
    published = []
    ledger_repo = MagicMock()
    ledger_repo.fetch_earliest_date.return_value = date(2025, 9, 1)
    handler = LedgerChangeHandler(
        published.append,
        ledger_repo,
        logger=MagicMock(),
    )

    plan = handler.on_sale_changed(None, None, "update")

    assert plan.from_date == date(2025, 9, 1)
    assert published[0].from_date == date(2025, 9, 1)


def test_change_without_date_and_ledger_raises() -> None:
    handler = LedgerChangeHandler(lambda event: None, logger=MagicMock())

    with pytest.raises(ValueError):
        handler.on_sale_changed(None, None, "update")
