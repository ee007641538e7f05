"""End-to-end tests of the wired ledger services on SQLite."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import insert

from src.domain.errors import OpeningBalanceError
from src.infrastructure import container
from src.infrastructure.ledger_repository import SqlAlchemyLedgerRepository
from src.infrastructure.schema import movements_table, sales_table
from src.infrastructure.settings import LedgerSettings


@pytest.fixture
def services(monkeypatch, db_port):
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())
    return container.build_ledger_services(
        db_port=db_port,
        settings=LedgerSettings(cascade_chunk_days=2),
    )


def _add_sale(engine, sale_id, day, channel, method, gross, commission):
    with engine.begin() as conn:
        conn.execute(
            insert(sales_table).values(
                id=sale_id,
                sale_date=day,
                channel=channel,
                payment_method=method,
                gross_price=Decimal(gross),
                commission=Decimal(commission),
            )
        )


def test_settlement_flow_updates_balances(services, sqlite_engine, db_port) -> None:
    services.ledger.establish_opening_balance(
        date(2025, 9, 1),
        "1000",
        "0",
        "0",
    )
    day = date(2025, 9, 2)
    _add_sale(sqlite_engine, "s1", day, "ML", "MercadoPago", "500", "50")
    _add_sale(sqlite_engine, "s2", day, "TN", "PagoNube", "1000", "100")
    with sqlite_engine.begin() as conn:
        conn.execute(
            insert(movements_table).values(
                id="m1",
                entry_date=date(2025, 9, 3),
                kind="Gasto",
                category="Publicidad",
                amount=Decimal("25"),
            )
        )

    services.ledger.apply_same_day_inputs(date(2025, 9, 3), "450", "876", "0")
    result = services.worker.drain()

    assert result.start_date == date(2025, 9, 2)
    assert result.end_date == date(2025, 9, 3)
    repository = SqlAlchemyLedgerRepository(db_port, logger=MagicMock())
    day_two = repository.fetch_record(date(2025, 9, 2))
    day_three = repository.fetch_record(date(2025, 9, 3))
    assert day_two.processor.pending_settlement == Decimal("450.00")
    assert day_two.platform.pending_settlement == Decimal("876.00")
    assert day_three.processor.pending_settlement == Decimal("0.00")
    assert day_three.platform.pending_settlement == Decimal("0.00")
    assert day_three.processor.available == Decimal("2301.00")
    assert services.audit.execute().is_consistent


def test_opening_must_stay_the_first_date(services) -> None:
    services.ledger.establish_opening_balance(date(2025, 9, 1), 0, 0, 0)
    services.ledger.get_or_create(date(2025, 9, 3))

    with pytest.raises(OpeningBalanceError):
        services.ledger.establish_opening_balance(date(2025, 9, 2), 0, 0, 0)