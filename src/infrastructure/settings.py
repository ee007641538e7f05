"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os

import dotenv

from src.domain.constants import (
    DEFAULT_EXCLUDED_INCOME_CATEGORIES,
    DEFAULT_GROSS_RECEIPTS_RATE,
    DEFAULT_VAT_RATE,
    storefront_commission_multiplier,
)
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for pricing and ledger recalculation.

    Attributes:
        vat_rate: VAT rate applied over commissions.
        gross_receipts_rate: IIBB rate used to re-inflate storefront
            commissions.
        cascade_chunk_days: Dates read and derived per cascade batch.
        excluded_income_categories: Income categories ignored by the ledger.
        advisory_lock_key: PostgreSQL advisory lock id for cascades.
    """

    vat_rate: Decimal = DEFAULT_VAT_RATE
    gross_receipts_rate: Decimal = DEFAULT_GROSS_RECEIPTS_RATE
    cascade_chunk_days: int = 31
    excluded_income_categories: tuple[str, ...] = (
        DEFAULT_EXCLUDED_INCOME_CATEGORIES
    )
    advisory_lock_key: int = 726354

    @property
    def commission_multiplier(self) -> Decimal:
        """Factor applied to storefront commissions (1.24 by default)."""
        return storefront_commission_multiplier(
            self.vat_rate,
            self.gross_receipts_rate,
        )

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Returns:
            LedgerSettings: Settings sourced from environment variables,
            with defaults for missing or invalid values.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        defaults = cls()
        return cls(
            vat_rate=cls._read_rate(
                "LEDGER_VAT_RATE",
                defaults.vat_rate,
                logger,
            ),
            gross_receipts_rate=cls._read_rate(
                "LEDGER_GROSS_RECEIPTS_RATE",
                defaults.gross_receipts_rate,
                logger,
            ),
            cascade_chunk_days=cls._read_positive_int(
                "LEDGER_CASCADE_CHUNK_DAYS",
                defaults.cascade_chunk_days,
                logger,
            ),
            excluded_income_categories=cls._read_categories(
                "LEDGER_EXCLUDED_INCOME_CATEGORIES",
                defaults.excluded_income_categories,
            ),
            advisory_lock_key=cls._read_positive_int(
                "LEDGER_ADVISORY_LOCK_KEY",
                defaults.advisory_lock_key,
                logger,
            ),
        )

    @staticmethod
    def _read_rate(name: str, default: Decimal, logger) -> Decimal:
        """Read a fractional rate such as ``0.21``.

        Args:
            name: Environment variable name.
            default: Value used when missing or invalid.
            logger: Logger used for warnings.

        Returns:
            Decimal: Rate between 0 and 1.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = Decimal(raw.strip().replace(",", "."))
        except InvalidOperation:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if not Decimal("0") <= value < Decimal("1"):
            logger.warning(f"{name}={raw!r} is not a fraction; using {default}")
            return default
        return value

    @staticmethod
    def _read_positive_int(name: str, default: int, logger) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if value < 1:
            logger.warning(f"{name} must be positive; using {default}")
            return default
        return value

    @staticmethod
    def _read_categories(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
        raw = os.getenv(name)
        if raw is None:
            return default
        return tuple(part.strip() for part in raw.split(",") if part.strip())


__all__ = ["LedgerSettings"]
