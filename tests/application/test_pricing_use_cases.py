"""Tests for rate resolution and sale pricing."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.price_sale import PriceSaleUseCase
from src.application.use_cases.resolve_rate import ResolveRateUseCase
from src.domain.errors import RateNotFoundError
from src.domain.models import (
    Channel,
    Condition,
    PaymentMethod,
    Rate,
    SaleDraft,
)


def _rates_repo(rate: Rate | None) -> MagicMock:
    repo = MagicMock()
    repo.fetch_rate.return_value = rate
    return repo


def test_resolve_rate_normalises_keys_before_lookup() -> None:
    """Raw values are parsed to enums and matched exactly."""
    rate = Rate(
        Channel.MARKETPLACE,
        PaymentMethod.PROCESSOR,
        Condition.INTEREST_FREE_INSTALLMENTS,
        commission_pct=Decimal("0.2"),
    )
    repo = _rates_repo(rate)

    result = ResolveRateUseCase(repo, logger=MagicMock()).execute(
        "MercadoLibre",
        "mercado pago",
        "Cuotas sin interes",
    )

    assert result is rate
    repo.fetch_rate.assert_called_once_with(
        Channel.MARKETPLACE,
        PaymentMethod.PROCESSOR,
        Condition.INTEREST_FREE_INSTALLMENTS,
    )


def test_missing_rate_is_fatal_and_names_the_key() -> None:
    """No wildcard fallback: the error names the unmatched key."""
    logger = MagicMock()
    use_case = ResolveRateUseCase(_rates_repo(None), logger=logger)

    with pytest.raises(RateNotFoundError) as excinfo:
        use_case.execute(Channel.STOREFRONT, PaymentMethod.BANK_TRANSFER)

    assert str(excinfo.value) == (
        "No rate configured for TN/Transferencia/Normal"
    )
    logger.error.assert_called_once()


def test_price_sale_uses_resolved_rate() -> None:
    """Pricing composes rate resolution and the calculator."""
    rate = Rate(
        Channel.STOREFRONT,
        PaymentMethod.PLATFORM,
        Condition.NORMAL,
        commission_pct=Decimal("0.03"),
    )
    resolve = ResolveRateUseCase(_rates_repo(rate), logger=MagicMock())
    use_case = PriceSaleUseCase(resolve, logger=MagicMock())

    result = use_case.execute(
        SaleDraft(
            channel=Channel.STOREFRONT,
            payment_method=PaymentMethod.PLATFORM,
            gross_price=Decimal("25000"),
            shipping_cost=Decimal("0"),
            product_cost=Decimal("10000"),
        )
    )

    assert result.commission == Decimal("750.00")
    assert result.tax == Decimal("157.50")
    assert result.gross_receipts_tax == Decimal("22.50")
    assert result.net_price == Decimal("24070.00")


def test_price_sale_does_not_guess_a_rate() -> None:
    resolve = ResolveRateUseCase(_rates_repo(None), logger=MagicMock())
    use_case = PriceSaleUseCase(resolve, logger=MagicMock())

    with pytest.raises(RateNotFoundError):
        use_case.execute(
            SaleDraft(
                channel=Channel.MARKETPLACE,
                payment_method=PaymentMethod.PROCESSOR,
                gross_price=Decimal("100"),
            )
        )


@pytest.mark.parametrize(
    "channel, pct, warned",
    [
        (Channel.STOREFRONT, Decimal("0.035"), True),
        (Channel.STOREFRONT, Decimal("0.03"), False),
        (Channel.MARKETPLACE, Decimal("0.035"), False),
    ],
)
def test_storefront_rate_with_another_iibb_rate_is_reported(
    channel,
    pct,
    warned,
) -> None:
    """Ledger contributions use the configured IIBB rate, not the row's."""
    rate = Rate(
        channel,
        PaymentMethod.PLATFORM,
        Condition.NORMAL,
        commission_pct=Decimal("0.03"),
        gross_receipts_pct=pct,
    )
    logger = MagicMock()
    use_case = PriceSaleUseCase(
        ResolveRateUseCase(_rates_repo(rate), logger=MagicMock()),
        gross_receipts_rate=Decimal("0.03"),
        logger=logger,
    )

    use_case.execute(
        SaleDraft(
            channel=channel,
            payment_method=PaymentMethod.PLATFORM,
            gross_price=Decimal("1000"),
        )
    )

    assert logger.warning.called is warned
    if warned:
        assert "0.035" in logger.warning.call_args.args[0]
