"""Channel-specific tax decomposition strategies.

Each policy answers how a commission amount splits into its tax-exclusive
part and VAT, how gross-receipts tax (IIBB) is obtained, and whether the
shipping cost is deducted from the sale's net price. Policies are selected
by ``(channel, payment_method)``; a new channel adds a policy, not a branch.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from src.domain.constants import DEFAULT_VAT_RATE, ZERO
from src.domain.models import Channel, PaymentMethod, Rate
from src.utils.decimal_utils import round_money


@dataclass(frozen=True)
class TaxSplit:
    """Tax-exclusive amount and the VAT attached to it."""

    exclusive: Decimal
    tax: Decimal


def additive_split(amount: Decimal, vat_rate: Decimal) -> TaxSplit:
    """Treat ``amount`` as tax-exclusive and add VAT on top."""
    return TaxSplit(
        exclusive=round_money(amount),
        tax=round_money(amount * vat_rate),
    )


def inclusive_split(amount: Decimal, vat_rate: Decimal) -> TaxSplit:
    """Extract the tax-exclusive part from a VAT-inclusive ``amount``."""
    exclusive = round_money(amount / (Decimal("1") + vat_rate))
    return TaxSplit(exclusive=exclusive, tax=round_money(amount) - exclusive)


def _manual_or_zero(manual: Decimal | None) -> Decimal:
    if manual is not None and manual > 0:
        return round_money(manual)
    return ZERO


class TaxPolicy(Protocol):
    """Capability shared by every channel tax policy."""

    deducts_shipping: bool

    def split_base(self, amount: Decimal) -> TaxSplit:
        """Split the base commission."""

    def split_extra(self, amount: Decimal) -> TaxSplit:
        """Split the extra commission."""

    def gross_receipts(
        self,
        commission: Decimal,
        rate: Rate,
        manual: Decimal | None,
    ) -> Decimal:
        """Return the IIBB amount for the combined commission."""

    def decompose_tax(self, commission: Decimal) -> TaxSplit:
        """Split a commission reported by the channel."""


@dataclass(frozen=True)
class StorefrontProcessorTaxPolicy:
    """Storefront sale paid through the processor.

    The processor's base commission is tax-exclusive, the platform's extra
    commission arrives tax-inclusive, IIBB is entered by hand and shipping is
    settled separately.
    """

    vat_rate: Decimal = DEFAULT_VAT_RATE
    deducts_shipping: bool = False

    def split_base(self, amount: Decimal) -> TaxSplit:
        return additive_split(amount, self.vat_rate)

    def split_extra(self, amount: Decimal) -> TaxSplit:
        return inclusive_split(amount, self.vat_rate)

    def gross_receipts(
        self,
        commission: Decimal,
        rate: Rate,
        manual: Decimal | None,
    ) -> Decimal:
        return _manual_or_zero(manual)

    def decompose_tax(self, commission: Decimal) -> TaxSplit:
        return self.split_base(commission)


@dataclass(frozen=True)
class StorefrontTaxPolicy:
    """Storefront sale on the platform rail: VAT and IIBB added on top."""

    vat_rate: Decimal = DEFAULT_VAT_RATE
    deducts_shipping: bool = True

    def split_base(self, amount: Decimal) -> TaxSplit:
        return additive_split(amount, self.vat_rate)

    def split_extra(self, amount: Decimal) -> TaxSplit:
        return additive_split(amount, self.vat_rate)

    def gross_receipts(
        self,
        commission: Decimal,
        rate: Rate,
        manual: Decimal | None,
    ) -> Decimal:
        if manual is not None and manual > 0:
            return round_money(manual)
        return round_money(commission * rate.gross_receipts_pct)

    def decompose_tax(self, commission: Decimal) -> TaxSplit:
        return self.split_base(commission)


@dataclass(frozen=True)
class MarketplaceTaxPolicy:
    """Marketplace commissions always include VAT; IIBB is manual."""

    vat_rate: Decimal = DEFAULT_VAT_RATE
    deducts_shipping: bool = True

    def split_base(self, amount: Decimal) -> TaxSplit:
        return inclusive_split(amount, self.vat_rate)

    def split_extra(self, amount: Decimal) -> TaxSplit:
        return inclusive_split(amount, self.vat_rate)

    def gross_receipts(
        self,
        commission: Decimal,
        rate: Rate,
        manual: Decimal | None,
    ) -> Decimal:
        return _manual_or_zero(manual)

    def decompose_tax(self, commission: Decimal) -> TaxSplit:
        return self.split_base(commission)


@dataclass(frozen=True)
class UntaxedPolicy:
    """Direct sales: commissions carry no VAT, IIBB only when entered."""

    deducts_shipping: bool = True

    def split_base(self, amount: Decimal) -> TaxSplit:
        return TaxSplit(exclusive=round_money(amount), tax=ZERO)

    def split_extra(self, amount: Decimal) -> TaxSplit:
        return TaxSplit(exclusive=round_money(amount), tax=ZERO)

    def gross_receipts(
        self,
        commission: Decimal,
        rate: Rate,
        manual: Decimal | None,
    ) -> Decimal:
        return _manual_or_zero(manual)

    def decompose_tax(self, commission: Decimal) -> TaxSplit:
        return self.split_base(commission)


_POLICY_FACTORIES = {
    (Channel.STOREFRONT, PaymentMethod.PROCESSOR): StorefrontProcessorTaxPolicy,
    (Channel.STOREFRONT, None): StorefrontTaxPolicy,
    (Channel.MARKETPLACE, None): MarketplaceTaxPolicy,
}


def select_tax_policy(
    channel: Channel,
    payment_method: PaymentMethod,
    vat_rate: Decimal = DEFAULT_VAT_RATE,
) -> TaxPolicy:
    """Return the tax policy for a channel and payment method.

    An exact ``(channel, payment_method)`` entry wins over the channel-wide
    entry; channels without an entry are untaxed.

    Args:
        channel: Sales platform of the sale.
        payment_method: Payment method of the sale.
        vat_rate: VAT rate applied by VAT-aware policies.

    Returns:
        TaxPolicy: Strategy used by the sale calculator.
    """
    factory = _POLICY_FACTORIES.get(
        (channel, payment_method),
        _POLICY_FACTORIES.get((channel, None)),
    )
    if factory is None:
        return UntaxedPolicy()
    return factory(vat_rate=vat_rate)


__all__ = [
    "TaxSplit",
    "TaxPolicy",
    "additive_split",
    "inclusive_split",
    "StorefrontProcessorTaxPolicy",
    "StorefrontTaxPolicy",
    "MarketplaceTaxPolicy",
    "UntaxedPolicy",
    "select_tax_policy",
]
