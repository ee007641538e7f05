"""Port for reading expense and income entries."""

from datetime import date
from typing import Protocol

from src.domain.models import MovementEntry


class MovementsRepositoryPort(Protocol):
    """Port exposing read access to expense/income entries by date."""

    def fetch_movements_between(
        self,
        start: date,
        end: date,
    ) -> list[MovementEntry]:
        """Return entries dated within ``[start, end]`` ordered by date."""


__all__ = ["MovementsRepositoryPort"]
