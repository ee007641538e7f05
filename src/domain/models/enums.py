"""Closed value sets used across sales, movements and the ledger.

Stored values keep the spelling used by the back office database (``TN``,
``MercadoPago``...). ``parse`` accepts the aliases found in imported rows and
rejects anything else so loosely-typed values never reach business logic.
"""

from enum import Enum
import unicodedata

from src.domain.errors import UnknownValueError


def _token(raw) -> str:
    text = unicodedata.normalize("NFKD", str(raw))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return "".join(ch for ch in text.lower() if ch.isalnum())


class _ParsableEnum(str, Enum):
    """String enum with alias-aware parsing."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def parse(cls, raw):
        """Return the member matching ``raw`` or raise UnknownValueError."""
        if isinstance(raw, cls):
            return raw
        if raw is None:
            raise UnknownValueError(cls.__name__, raw)
        token = _token(raw)
        for member in cls:
            if token in (_token(member.value), _token(member.name)):
                return member
        alias = cls._aliases().get(token)
        if alias is not None:
            return cls(alias)
        raise UnknownValueError(cls.__name__, raw)

    def __str__(self) -> str:
        return str(self.value)


class Channel(_ParsableEnum):
    """Sales platform a record belongs to."""

    STOREFRONT = "TN"
    MARKETPLACE = "ML"
    DIRECT = "Directo"
    GENERAL = "General"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "tiendanube": "TN",
            "nube": "TN",
            "mercadolibre": "ML",
            "meli": "ML",
            "direct": "Directo",
        }


class PaymentMethod(_ParsableEnum):
    """How the buyer paid."""

    PROCESSOR = "MercadoPago"
    PLATFORM = "PagoNube"
    BANK_TRANSFER = "Transferencia"
    CASH = "Efectivo"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "mp": "MercadoPago",
            "nubepago": "PagoNube",
            "transfer": "Transferencia",
            "banktransfer": "Transferencia",
            "cash": "Efectivo",
        }


class Condition(_ParsableEnum):
    """Commercial condition that selects a rate row."""

    NORMAL = "Normal"
    TRANSFER = "Transferencia"
    INTEREST_FREE_INSTALLMENTS = "Cuotas sin interés"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "cuotas": "Cuotas sin interés",
            "installments": "Cuotas sin interés",
            "transfer": "Transferencia",
        }


class MovementKind(_ParsableEnum):
    """Expense or income entry."""

    EXPENSE = "Gasto"
    INCOME = "Ingreso"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "gastos": "Gasto",
            "ingresos": "Ingreso",
        }


class ChangeOperation(_ParsableEnum):
    """Mutation applied to a ledger input record."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


__all__ = [
    "Channel",
    "PaymentMethod",
    "Condition",
    "MovementKind",
    "ChangeOperation",
]
