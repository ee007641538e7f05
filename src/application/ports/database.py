"""Database ports for the settlement back office.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations are expected to provide
concrete adapters that satisfy this port.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the shared back office store.

    Application use cases can depend on this protocol instead of concrete
    database drivers or configuration details.
    """

    def get_backoffice_engine(self) -> Engine:
        """Get the engine for the back office database.

        Returns:
            Engine: SQLAlchemy engine holding sales, movements, rates and
            the settlement ledger.
        """


__all__ = ["DatabaseEnginePort"]
