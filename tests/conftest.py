"""Pytest fixtures for ledger tests."""

import pytest
from sqlalchemy import create_engine

from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.schema import create_schema

from factories import (
    InMemoryLedgerRepository,
    InMemoryMovementsRepository,
    InMemorySalesRepository,
)


@pytest.fixture
def ledger_repo():
    return InMemoryLedgerRepository()


@pytest.fixture
def sales_repo():
    return InMemorySalesRepository()


@pytest.fixture
def movements_repo():
    return InMemoryMovementsRepository()


@pytest.fixture
def sqlite_engine(tmp_path):
    """Throwaway SQLite back office database with every table created."""
    engine = create_engine(f"sqlite:///{tmp_path / 'backoffice.db'}", future=True)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_port(sqlite_engine):
    return SqlAlchemyDatabaseEngineAdapter(sqlite_engine)
