"""Rebuild a guest cart from authoritative catalog prices.

Cart lines arrive from the guest device and may carry any price or name.
:func:`revalidate` discards every claimed value and rebuilds each line from
the catalog store. Shape checks run before any lookup so that obviously bad
carts never touch storage.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from config import get_settings

from ..domain import CartLine, CatalogItem, RevalidatedCart, Selection, TrustedLine
from ..errors import (
    EmptyCart,
    InvalidInput,
    InvalidQuantity,
    ItemNotFound,
    ItemUnavailable,
    TooManyLines,
)
from ..repos.catalog_repo import CatalogRepo

MAX_MODIFIERS_PER_LINE = 20


def _check_shape(lines: Sequence[CartLine], max_lines: int, max_quantity: int) -> None:
    if not lines:
        raise EmptyCart()
    if len(lines) > max_lines:
        raise TooManyLines(len(lines), max_lines)
    for index, line in enumerate(lines):
        qty = line.quantity
        # bool is an int subclass; True must not pass as a quantity of 1
        if isinstance(qty, bool) or not isinstance(qty, int):
            raise InvalidQuantity(index, qty, max_quantity)
        if not 1 <= qty <= max_quantity:
            raise InvalidQuantity(index, qty, max_quantity)
        if len(line.modifiers) > MAX_MODIFIERS_PER_LINE:
            raise InvalidInput(
                f"Maximum {MAX_MODIFIERS_PER_LINE} modifiers per line",
                details=[
                    {"field": f"items[{index}].modifiers", "error": "too_many_modifiers"}
                ],
            )


def _resolve(
    entries: Iterable[dict], selection: Selection, field: str
) -> dict:
    """Find the catalog entry picked by ``selection`` (id first, then name)."""
    entries = list(entries)
    if selection.id is not None:
        for entry in entries:
            if str(entry.get("id")) == str(selection.id):
                return entry
    if selection.name:
        for entry in entries:
            if entry.get("name") == selection.name:
                return entry
    raise InvalidInput(
        "Unknown selection",
        details=[{"field": field, "error": "unknown_selection", "value": selection.id or selection.name}],
    )


def _delta(entry: dict) -> int:
    return int(entry.get("price_delta") or 0)


def _price_line(index: int, line: CartLine, item: CatalogItem) -> TrustedLine:
    unit_price = item.price
    labels: List[str] = []
    if line.selected_option is not None:
        option = _resolve(item.options, line.selected_option, f"items[{index}].selected_option")
        unit_price += _delta(option)
        labels.append(option["name"])
    if line.selected_variant is not None:
        variant = _resolve(item.variants, line.selected_variant, f"items[{index}].selected_variant")
        unit_price += _delta(variant)
        labels.append(variant["name"])
    modifiers = []
    for pos, selection in enumerate(line.modifiers):
        modifier = _resolve(item.modifiers, selection, f"items[{index}].modifiers[{pos}]")
        unit_price += _delta(modifier)
        modifiers.append(
            {"id": modifier.get("id"), "name": modifier["name"], "price_delta": _delta(modifier)}
        )
    return TrustedLine(
        catalog_item_id=item.id,
        name=item.name,
        unit_price=unit_price,
        quantity=line.quantity,
        line_total=unit_price * line.quantity,
        notes=" - ".join(labels) or None,
        customer_notes=line.customer_notes,
        modifiers=tuple(modifiers),
    )


async def revalidate(
    tenant_id: str,
    cart_lines: Iterable[CartLine],
    repo: CatalogRepo,
    *,
    max_lines: int | None = None,
    max_quantity: int | None = None,
) -> RevalidatedCart:
    """Return trusted lines and subtotal for ``cart_lines``.

    ``claimed_name`` and ``claimed_unit_price`` are never read. Raises
    :class:`EmptyCart`, :class:`TooManyLines` or :class:`InvalidQuantity`
    before any catalog lookup, then :class:`ItemNotFound` or
    :class:`ItemUnavailable` per line.
    """

    settings = get_settings()
    max_lines = max_lines or settings.max_cart_lines
    max_quantity = max_quantity or settings.max_line_quantity
    lines = list(cart_lines)
    _check_shape(lines, max_lines, max_quantity)

    items: Dict[str, CatalogItem] = {}
    trusted: List[TrustedLine] = []
    for index, line in enumerate(lines):
        item = items.get(line.catalog_item_id)
        if item is None:
            item = await repo.get_item(tenant_id, line.catalog_item_id)
            if item is None:
                raise ItemNotFound(line.catalog_item_id)
            items[line.catalog_item_id] = item
        if not item.available:
            raise ItemUnavailable(item.id, item.name)
        trusted.append(_price_line(index, line, item))

    subtotal = sum(line.line_total for line in trusted)
    if subtotal <= 0:
        raise InvalidInput(
            "Order total must be greater than zero",
            details=[{"field": "items", "error": "zero_total"}],
        )
    return RevalidatedCart(trusted_lines=tuple(trusted), trusted_subtotal=subtotal)


__all__ = ["revalidate", "MAX_MODIFIERS_PER_LINE"]
