"""Leaf aggregation and store-priced totals for fusion trees."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .catalog import CatalogIndex
from .fusion import FusionNode, iter_leaves
from .pricing import price_at_store


class LeafRef(NamedTuple):
    name: str
    rank: int


@dataclass(frozen=True)
class TotalsRow:
    count: int
    name: str
    rank: int
    price: int | float | None = None
    purchasable: bool = False
    # Unpriced while a rank limit is active: counted as already in hand.
    assumed_owned: bool = False

    @property
    def subtotal(self) -> int | float | None:
        return None if self.price is None else self.count * self.price

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "name": self.name,
            "rank": self.rank,
            "price": self.price,
            "purchasable": self.purchasable,
            "assumed_owned": self.assumed_owned,
            "subtotal": self.subtotal,
        }


@dataclass
class TotalsTable:
    rows: list[TotalsRow] = field(default_factory=list)
    store_level: int | None = None
    total_price: int | float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "store_level": self.store_level,
            "rows": [row.to_dict() for row in self.rows],
            "total_price": self.total_price,
        }


def collect_leaves(nodes: FusionNode | Iterable[FusionNode]) -> list[LeafRef]:
    """Leaves in traversal order, skipping missing and cycle markers."""
    if isinstance(nodes, FusionNode):
        nodes = [nodes]
    return [
        LeafRef(leaf.name, leaf.rank)
        for leaf in iter_leaves(nodes)
        if not leaf.missing and not leaf.cycle
    ]


def totals(
    leaves: Iterable[LeafRef],
    *,
    index: CatalogIndex | None = None,
    store_level: int | None = None,
    fuse_rank_limit: int | None = None,
) -> TotalsTable:
    """Count leaves by (name, rank), sorted by rank then name.

    With a store level and an index, each row carries its effective unit
    price and the table carries the sum of ``count * price`` over priced rows.
    """
    counts = Counter(LeafRef(*leaf) for leaf in leaves)
    priced = store_level is not None and index is not None

    rows: list[TotalsRow] = []
    for (name, rank), count in counts.items():
        if not priced:
            rows.append(TotalsRow(count=count, name=name, rank=rank))
            continue
        info = price_at_store(index.lookup(name), store_level)
        rows.append(
            TotalsRow(
                count=count,
                name=name,
                rank=rank,
                price=info.price,
                purchasable=info.purchasable,
                assumed_owned=info.price is None and fuse_rank_limit is not None,
            )
        )
    rows.sort(key=lambda row: (row.rank, row.name))

    table = TotalsTable(rows=rows, store_level=store_level if priced else None)
    if priced:
        table.total_price = sum(row.subtotal for row in rows if row.subtotal is not None)
    return table
