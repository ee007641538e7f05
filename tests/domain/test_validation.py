"""Tests for settlement input validation."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.domain.errors import LedgerInputError
from src.domain.models import LedgerRecord, PlatformRail, ProcessorRail
from src.domain.services.validation import (
    validate_balance_signs,
    validate_settlement_inputs,
)

DAY = date(2025, 9, 3)


def test_negative_inputs_are_rejected() -> None:
    with pytest.raises(LedgerInputError) as excinfo:
        validate_settlement_inputs(DAY, Decimal("-1"), Decimal("0"), Decimal("0"))

    assert excinfo.value.day == DAY
    assert "processor settled today" in excinfo.value.reason


def test_withheld_tax_cannot_exceed_transfer() -> None:
    with pytest.raises(LedgerInputError, match="exceeds"):
        validate_settlement_inputs(DAY, Decimal("0"), Decimal("10"), Decimal("11"))


def test_valid_inputs_pass() -> None:
    validate_settlement_inputs(DAY, Decimal("5"), Decimal("10"), Decimal("10"))


def test_negative_pending_balances_are_logged() -> None:
    logger = MagicMock()
    record = LedgerRecord(
        ledger_date=DAY,
        processor=ProcessorRail(pending_settlement=Decimal("-5")),
        platform=PlatformRail(pending_settlement=Decimal("3")),
    )

    validate_balance_signs(record, logger)

    logger.warning.assert_called_once()
    assert "Processor" in logger.warning.call_args.args[0]
