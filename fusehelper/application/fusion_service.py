"""Application service for item lookup and fusion planning."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Any

from fusehelper.data.config import ResolverConfig
from fusehelper.data.dataset import ItemDatabase
from fusehelper.data.fusion import FusionNode, FusionPolicy, FusionResolver, NodeBudget
from fusehelper.data.matcher import ItemMatcher, SearchResult
from fusehelper.data.models import Item, Recipe
from fusehelper.data.pricing import MAX_STORE_LEVEL, MIN_STORE_LEVEL
from fusehelper.data.recipes import ingredient_label, sort_recipes
from fusehelper.data.totals import TotalsTable, collect_leaves, totals as build_totals

logger = logging.getLogger(__name__)

_RANK_UP_TEXT_RE = re.compile(r"rank\s*up\s*item", re.IGNORECASE)


@dataclass
class FusionResult:
    item: Item
    recipe_index: int | None = None
    recipe: Recipe | None = None
    nodes: list[FusionNode] = field(default_factory=list)
    totals: TotalsTable = field(default_factory=TotalsTable)
    policy: FusionPolicy = field(default_factory=FusionPolicy)
    truncated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": {"name": self.item.name, "rank": self.item.rank, "type": self.item.type},
            "recipe_index": self.recipe_index,
            "recipe": [ing.model_dump() for ing in self.recipe.ingredients] if self.recipe else None,
            "policy": {
                "fuse_rank_limit": self.policy.fuse_rank_limit,
                "store_level": self.policy.store_level,
            },
            "nodes": [node.to_dict() for node in self.nodes],
            "totals": self.totals.to_dict(),
            "truncated": self.truncated,
        }


def describe_item(item: Item) -> dict[str, Any]:
    """Summary of an item with its recipes numbered in selection order."""
    description = item.description or ""
    rank_up_note = None
    if item.rank_up and not _RANK_UP_TEXT_RE.search(description):
        if item.rank_up_for:
            rank_up_note = f"Rank Up Item for: {' / '.join(item.rank_up_for)}"
        else:
            rank_up_note = "Rank Up Item"

    recipes = sort_recipes(item.recipes)
    return {
        "name": item.name,
        "rank": item.rank,
        "type": item.type,
        "description": item.description,
        "rank_up_note": rank_up_note,
        "stats": [{"code": code, "value": item.stats[code]} for code in sorted(item.stats or {})],
        "recipe_count": len(recipes),
        "recipes": [
            {
                "number": number,
                "ingredients": [ingredient_label(ing) for ing in recipe.ingredients],
            }
            for number, recipe in enumerate(recipes, start=1)
        ],
    }


class FuseApplicationService:
    def __init__(self, *, database: ItemDatabase, config: ResolverConfig | None = None) -> None:
        self._database = database
        self._config = config or ResolverConfig()

    @property
    def database(self) -> ItemDatabase:
        return self._database

    def find(self, query: str, *, limit: int | None = None, full: bool = False) -> SearchResult:
        if limit is None:
            limit = self._config.full_limit if full else self._config.search_limit
        if limit < 1:
            raise ValueError("limit must be at least 1")
        return ItemMatcher(self._database.index).search(query, limit)

    def search(self, query: str, *, limit: int | None = None, full: bool = False) -> dict[str, Any]:
        result = self.find(query, limit=limit, full=full)
        payload = result.to_dict()
        selected = result.selected
        payload["selected"] = selected.name if selected else None
        return payload

    def describe(self, query: str) -> dict[str, Any] | None:
        selected = self.find(query).selected
        return describe_item(selected) if selected else None

    def fuse_item(
        self,
        item: Item,
        *,
        recipe_index: int | None = None,
        policy: FusionPolicy | None = None,
        node_budget: int | None = None,
    ) -> FusionResult:
        """Expand one recipe of ``item`` into a fusion tree with totals.

        ``recipe_index`` is 1-based over the sorted recipes and is clamped to
        the available range. Both ingredients share one node budget.
        """
        policy = policy or FusionPolicy()
        if policy.store_level is not None and not MIN_STORE_LEVEL <= policy.store_level <= MAX_STORE_LEVEL:
            raise ValueError(f"store level must be between {MIN_STORE_LEVEL} and {MAX_STORE_LEVEL}")

        recipes = sort_recipes(item.recipes)
        result = FusionResult(item=item, policy=policy)
        if not recipes:
            return result

        position = max(1, min(recipe_index or 1, len(recipes)))
        recipe = recipes[position - 1]
        index = self._database.index
        budget = NodeBudget(node_budget if node_budget is not None else self._config.node_budget)
        resolver = FusionResolver(index)
        visited = frozenset({item.key})
        nodes = [resolver.expand(ing, policy, budget, visited) for ing in recipe.ingredients]

        if budget.truncations:
            logger.warning(
                "[Fusion] Node budget exhausted for %s; %s branch(es) truncated",
                item.name,
                budget.truncations,
            )

        result.recipe_index = position
        result.recipe = recipe
        result.nodes = nodes
        result.truncated = budget.truncations > 0
        result.totals = build_totals(
            collect_leaves(nodes),
            index=index,
            store_level=policy.store_level,
            fuse_rank_limit=policy.fuse_rank_limit,
        )
        return result

    def fuse(
        self,
        query: str,
        *,
        recipe_index: int | None = None,
        fuse_rank_limit: int | None = None,
        store_level: int | None = None,
    ) -> dict[str, Any]:
        found = self.find(query)
        item = found.selected
        if item is None:
            return {"found": False, "search": found.to_dict()}

        policy = FusionPolicy(fuse_rank_limit=fuse_rank_limit, store_level=store_level)
        result = self.fuse_item(item, recipe_index=recipe_index, policy=policy)
        payload = {"found": True, **result.to_dict()}
        if result.recipe is None:
            payload["summary"] = describe_item(item)
        return payload
