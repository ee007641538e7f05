"""Port for reading sales that feed the settlement ledger."""

from datetime import date
from typing import Protocol

from src.domain.models import Sale


class SalesRepositoryPort(Protocol):
    """Port exposing read access to sales by date."""

    def fetch_sales_between(self, start: date, end: date) -> list[Sale]:
        """Return sales dated within ``[start, end]`` ordered by date."""


__all__ = ["SalesRepositoryPort"]
