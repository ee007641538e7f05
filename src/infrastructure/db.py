"""Database infrastructure for the settlement back office.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the back office database (sales, expenses, rates and
the settlement ledger). It belongs to the infrastructure layer because it
deals with external systems (PostgreSQL, or SQLite for local use).
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort

BACKOFFICE_DB_URL_ENV = "BACKOFFICE_DB_URL"


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Values from a local ``.env`` file are loaded first.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Server databases get a small connection pool with health checks;
    SQLite keeps SQLAlchemy's default pool for file databases.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance.
    """
    if db_url.startswith("sqlite"):
        return create_engine(db_url, future=True)
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_backoffice_engine: Optional[Engine] = None


def get_backoffice_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the back office database.

    Returns:
        Engine: Lazily initialized engine read from ``BACKOFFICE_DB_URL``.
    """
    global _backoffice_engine
    if _backoffice_engine is None:
        db_url = _get_env_var(BACKOFFICE_DB_URL_ENV)
        _backoffice_engine = _create_engine(db_url)
    return _backoffice_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so application use cases can depend only on the protocol.
    An explicit engine can be injected, which tests use with SQLite.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    def get_backoffice_engine(self) -> Engine:
        """Get the engine for the back office database.

        Returns:
            Engine: SQLAlchemy engine connected to the back office store.
        """
        if self._engine is not None:
            return self._engine
        return get_backoffice_engine()


__all__ = [
    "BACKOFFICE_DB_URL_ENV",
    "get_backoffice_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
