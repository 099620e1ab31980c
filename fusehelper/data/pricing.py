"""Tiered store pricing."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Item

MIN_STORE_LEVEL = 1
MAX_STORE_LEVEL = 5


@dataclass(frozen=True)
class StorePrice:
    purchasable: bool
    price: int | float | None = None


NOT_FOR_SALE = StorePrice(purchasable=False)


def clamp_store_level(level: int) -> int:
    return max(MIN_STORE_LEVEL, min(MAX_STORE_LEVEL, level))


def price_at_store(item: Item | None, store_level: int | None) -> StorePrice:
    """Effective price of ``item`` at store tier ``store_level``.

    A scalar price applies at every tier. A per-tier list is indexed from
    tier 1; the latest non-null entry at or below the requested tier wins,
    since tiers unlock monotonically.
    """
    if item is None or store_level is None:
        return NOT_FOR_SALE

    price = item.price
    if price is None:
        return NOT_FOR_SALE
    if isinstance(price, (int, float)):
        return StorePrice(purchasable=True, price=price)

    latest = None
    for value in price[: max(store_level, 0)]:
        if value is not None:
            latest = value
    if latest is None:
        return NOT_FOR_SALE
    return StorePrice(purchasable=True, price=latest)
