"""Read-only lookup structures derived from the item list."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from fusehelper.core.text import normalize, tokenize

from .models import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexEntry:
    item: Item
    normalized_name: str
    tokens: tuple[str, ...]


@dataclass
class CatalogIndex:
    """Name, type and token indexes over a loaded catalog.

    ``name_map`` is keyed by normalized name; when two items normalize to
    the same key the one loaded last wins. ``type_rank_map`` groups typed
    items by rank in load order.
    """

    entries: list[IndexEntry] = field(default_factory=list)
    name_map: dict[str, Item] = field(default_factory=dict)
    type_rank_map: dict[str, dict[int, list[Item]]] = field(default_factory=dict)

    @classmethod
    def build(cls, items: list[Item]) -> "CatalogIndex":
        index = cls()
        for item in items:
            key = normalize(item.name)
            index.entries.append(IndexEntry(item=item, normalized_name=key, tokens=tuple(tokenize(item.name))))
            if key in index.name_map:
                logger.debug("[Catalog] Name collision on %r, keeping the later item", key)
            index.name_map[key] = item
            if item.type:
                by_rank = index.type_rank_map.setdefault(item.type, {})
                by_rank.setdefault(item.rank, []).append(item)
        logger.info(
            "[Catalog] Indexed %s items (%s names, %s types)",
            len(index.entries),
            len(index.name_map),
            len(index.type_rank_map),
        )
        return index

    @property
    def known_types(self) -> list[str]:
        return list(self.type_rank_map)

    def lookup(self, name: str) -> Item | None:
        """Exact normalized-name lookup."""
        key = normalize(name)
        if not key:
            return None
        return self.name_map.get(key)

    def items_by_type_and_rank(self, item_type: str, rank: int) -> list[Item]:
        return list(self.type_rank_map.get(item_type, {}).get(rank, []))

    def __len__(self) -> int:
        return len(self.entries)
