"""Tests for SettlementLedgerUseCase."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.settlement_ledger import SettlementLedgerUseCase
from src.domain.errors import (
    LedgerInputError,
    LedgerRecordNotFoundError,
    NoPriorRecordError,
    OpeningBalanceError,
)
from src.domain.models import LedgerInputChanged

from factories import make_opening

OPENING_DAY = date(2025, 9, 1)


@pytest.fixture
def events():
    return []


@pytest.fixture
def use_case(ledger_repo, events):
    return SettlementLedgerUseCase(
        ledger_repo,
        on_change=events.append,
        logger=MagicMock(),
    )


@pytest.fixture
def opened(ledger_repo):
    ledger_repo.save_opening_record(
        make_opening(OPENING_DAY, "1000.00", "200.00", "300.00")
    )
    return ledger_repo


def test_get_or_create_requires_an_opening_balance(use_case) -> None:
    with pytest.raises(NoPriorRecordError) as excinfo:
        use_case.get_or_create(date(2025, 9, 2))

    assert excinfo.value.day == date(2025, 9, 2)


def test_get_or_create_carries_balances_forward(use_case, opened) -> None:
    record = use_case.get_or_create(date(2025, 9, 4))

    assert record.processor.available == Decimal("1000.00")
    assert record.platform.pending_settlement == Decimal("300.00")
    assert record.needs_recalculation is True
    assert opened.fetch_record(date(2025, 9, 4)) == record
    assert use_case.get_or_create(date(2025, 9, 4)) == record


def test_apply_same_day_inputs_marks_dirty_and_publishes(
    use_case,
    opened,
    events,
) -> None:
    day = date(2025, 9, 2)

    record = use_case.apply_same_day_inputs(
        day,
        Decimal("150"),
        "80.5",
        Decimal("2.5"),
        notes="transfer",
    )

    assert record.processor.settled_today == Decimal("150.00")
    assert record.platform.settled_today == Decimal("80.50")
    assert record.platform.tax_withheld_today == Decimal("2.50")
    assert record.notes == "transfer"
    assert record.needs_recalculation is True
    assert record.processor.available == Decimal("1000.00")
    assert events == [LedgerInputChanged(day, "settlement inputs updated")]


def test_invalid_inputs_store_nothing(use_case, opened, events) -> None:
    with pytest.raises(LedgerInputError):
        use_case.apply_same_day_inputs(date(2025, 9, 2), -1, 0, 0)

    assert opened.fetch_record(date(2025, 9, 2)) is None
    assert events == []


def test_opening_record_inputs_are_immutable(use_case, opened) -> None:
    with pytest.raises(OpeningBalanceError):
        use_case.apply_same_day_inputs(OPENING_DAY, 10, 0, 0)


def test_read_missing_record(use_case, opened) -> None:
    with pytest.raises(LedgerRecordNotFoundError):
        use_case.read(date(2025, 9, 9))
    assert use_case.read(OPENING_DAY).is_opening is True


def test_establish_opening_balance_on_empty_ledger(
    use_case,
    ledger_repo,
    events,
) -> None:
    record = use_case.establish_opening_balance(
        OPENING_DAY,
        "40976132.41",
        "879742.32",
        "1180104.47",
        notes="bootstrap",
    )

    assert record.is_opening is True
    assert record.total_available == Decimal("42156236.88")
    assert ledger_repo.fetch_opening_record() == record
    assert events == []


def test_establish_opening_balance_rejects_later_dates(use_case, opened) -> None:
    with pytest.raises(OpeningBalanceError) as excinfo:
        use_case.establish_opening_balance(date(2025, 9, 5), 1, 1, 1)

    assert "2025-09-01" in excinfo.value.reason


def test_reestablishing_opening_requests_a_cascade(
    use_case,
    opened,
    events,
) -> None:
    use_case.get_or_create(date(2025, 9, 3))

    use_case.establish_opening_balance(OPENING_DAY, 5000, 0, 0)

    assert opened.fetch_opening_record().processor.available == Decimal(
        "5000.00"
    )
    assert events == [LedgerInputChanged(date(2025, 9, 2), "opening balance")]
