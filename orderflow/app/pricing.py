"""Order pricing from a trusted subtotal."""

from __future__ import annotations

from .domain import PricingBreakdown, TaxConfig
from .utils.money import percent_of


def compute(
    subtotal: int, tax_config: TaxConfig, discount_amount: int = 0
) -> PricingBreakdown:
    """Return the priced breakdown for ``subtotal``.

    Tax and service charge are both taken on the pre-discount subtotal and
    each is rounded half-up on its own. The total is clamped at zero.

    Examples
    --------
    >>> cfg = TaxConfig(True, 18, True, 10)
    >>> compute(2000, cfg).total
    2560
    """

    tax_amount = (
        percent_of(subtotal, tax_config.tax_rate) if tax_config.enable_tax else 0
    )
    service_charge_amount = (
        percent_of(subtotal, tax_config.service_charge_rate)
        if tax_config.enable_service_charge
        else 0
    )
    discount_amount = max(discount_amount, 0)
    total = max(0, subtotal + tax_amount + service_charge_amount - discount_amount)
    return PricingBreakdown(
        subtotal=subtotal,
        tax_amount=tax_amount,
        service_charge_amount=service_charge_amount,
        discount_amount=discount_amount,
        total=total,
    )


__all__ = ["compute"]
