"""Environment parsing shared by the command-line adapters."""

from datetime import date
from decimal import Decimal
import os

from src.utils.decimal_utils import parse_amount


def parse_date(value: str | None, logger) -> date | None:
    """Parse an ISO date string into a date.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        date | None: Parsed date or None when missing or invalid.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None


def read_date(name: str, logger) -> date | None:
    """Read an ISO date from environment variable ``name``."""
    return parse_date(os.getenv(name), logger)


def read_amount(
    name: str,
    logger,
    default: Decimal | None = None,
) -> Decimal | None:
    """Read an amount from environment variable ``name``.

    Returns:
        Decimal | None: Parsed amount, ``default`` when blank, or None when
        the value is invalid or required but missing.
    """
    try:
        return parse_amount(os.getenv(name), default=default)
    except ValueError as exc:
        logger.warning(f"{name}: {exc}")
        return None


__all__ = ["parse_date", "read_date", "read_amount"]
