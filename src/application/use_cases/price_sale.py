"""Use case pricing a sale before the CRUD layer persists it."""

from decimal import Decimal

from src.application.use_cases.resolve_rate import ResolveRateUseCase
from src.domain.constants import DEFAULT_GROSS_RECEIPTS_RATE, DEFAULT_VAT_RATE
from src.domain.models import Channel, SaleComputation, SaleDraft
from src.domain.services.sale_calculator import compute_sale
from src.infrastructure.logging.logger import get_app_logger


class PriceSaleUseCase:
    """Resolve the sale's rate and compute its net amounts.

    A missing rate aborts pricing: no sale is ever priced with a guessed
    rate. Storefront ledger contributions re-inflate commissions with one
    configured IIBB rate, so a storefront rate carrying another
    ``gross_receipts_pct`` is reported.
    """

    def __init__(
        self,
        resolve_rate: ResolveRateUseCase,
        vat_rate: Decimal = DEFAULT_VAT_RATE,
        gross_receipts_rate: Decimal = DEFAULT_GROSS_RECEIPTS_RATE,
        logger=None,
    ) -> None:
        self._resolve_rate = resolve_rate
        self._vat_rate = vat_rate
        self._gross_receipts_rate = gross_receipts_rate
        self._logger = logger or get_app_logger()

    def execute(self, draft: SaleDraft) -> SaleComputation:
        """Price ``draft``.

        Raises:
            RateNotFoundError: If the sale's rate is not configured.
        """
        rate = self._resolve_rate.execute(
            draft.channel,
            draft.payment_method,
            draft.condition,
        )
        if (
            rate.channel == Channel.STOREFRONT
            and rate.gross_receipts_pct != self._gross_receipts_rate
        ):
            self._logger.warning(
                f"Rate {rate.channel}/{rate.payment_method}/{rate.condition} "
                f"withholds IIBB at {rate.gross_receipts_pct}; ledger "
                f"contributions assume {self._gross_receipts_rate}"
            )
        computation = compute_sale(
            draft.gross_price,
            draft.shipping_cost,
            draft.product_cost,
            rate,
            rate.channel,
            rate.payment_method,
            manual_commission=draft.manual_commission,
            manual_tax=draft.manual_tax,
            vat_rate=self._vat_rate,
        )
        self._logger.debug(
            f"Priced {rate.channel}/{rate.payment_method} sale: "
            f"gross={draft.gross_price}, net={computation.net_price}"
        )
        return computation


__all__ = ["PriceSaleUseCase"]
