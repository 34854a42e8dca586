"""Minor-unit money helpers.

Amounts are integers in the currency's smallest unit (cents, centimes).
Derived amounts are rounded half-up independently so that no fractional
remainder carries from one field into the next.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

HUNDRED = Decimal("100")


def to_decimal(value: int | float | str | Decimal | None) -> Decimal:
    """Return ``value`` as a :class:`Decimal` (``None`` becomes zero)."""

    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_minor(amount: Decimal) -> int:
    """Round ``amount`` half-up to a whole minor unit."""

    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(base: int, rate: int | float | str | Decimal) -> int:
    """Return ``rate`` percent of ``base`` rounded half-up."""

    return round_minor(Decimal(base) * to_decimal(rate) / HUNDRED)
