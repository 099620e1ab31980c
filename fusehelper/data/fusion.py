"""Recursive fusion-tree expansion.

Expands an ingredient reference into a tree of base ingredients under an
optional stopping policy:
- ``fuse_rank_limit``: stop once an ingredient's rank is at or below the limit
- ``store_level``: stop once the ingredient can be bought at that store tier
- no policy: expand the simplest recipe of every craftable ingredient

Dangling references become ``missing`` leaves, repeats along one
root-to-leaf path become ``cycle`` leaves, and a shared ``NodeBudget`` caps
the total number of expansion calls so cyclic or deep data always terminates.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
import logging
from typing import Any

from .catalog import CatalogIndex
from .models import Ingredient, Recipe
from .pricing import price_at_store
from .recipes import sort_recipes

logger = logging.getLogger(__name__)

VisitedKeys = frozenset[tuple[str, int]]


@dataclass(frozen=True)
class FusionPolicy:
    fuse_rank_limit: int | None = None
    store_level: int | None = None

    @property
    def active(self) -> bool:
        return self.fuse_rank_limit is not None or self.store_level is not None


@dataclass
class NodeBudget:
    """Expansion-call counter shared by every call of one resolution."""
    remaining: int
    truncations: int = 0

    def consume(self) -> bool:
        if self.remaining <= 0:
            self.truncations += 1
            return False
        self.remaining -= 1
        return True

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0


@dataclass
class FusionNode:
    """One ingredient in a fusion tree: a leaf, or two children plus a recipe."""
    name: str
    rank: int
    children: list[FusionNode] = field(default_factory=list)
    recipe: Recipe | None = None
    leaf: bool = False
    missing: bool = False
    cycle: bool = False
    truncated: bool = False

    @classmethod
    def make_leaf(cls, ingredient: Ingredient, **flags: bool) -> "FusionNode":
        return cls(name=ingredient.name, rank=ingredient.rank, leaf=True, **flags)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["FusionNode"]:
        """Depth-first, left-to-right traversal."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "rank": self.rank}
        for flag in ("leaf", "missing", "cycle", "truncated"):
            if getattr(self, flag):
                data[flag] = True
        if self.recipe is not None:
            data["recipe"] = [ing.model_dump() for ing in self.recipe.ingredients]
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def iter_leaves(nodes: Iterable[FusionNode]) -> Iterator[FusionNode]:
    for node in nodes:
        for sub in node.walk():
            if sub.is_leaf:
                yield sub


def all_leaves_within_rank(nodes: Iterable[FusionNode], limit: int) -> bool:
    return all(leaf.rank <= limit for leaf in iter_leaves(nodes))


def all_leaves_purchasable(nodes: Iterable[FusionNode], index: CatalogIndex, store_level: int) -> bool:
    return all(
        price_at_store(index.lookup(leaf.name), store_level).purchasable
        for leaf in iter_leaves(nodes)
    )


class FusionResolver:
    """Builds fusion trees against a catalog index."""

    def __init__(self, index: CatalogIndex) -> None:
        self._index = index

    def expand(
        self,
        ingredient: Ingredient,
        policy: FusionPolicy,
        budget: NodeBudget,
        visited: VisitedKeys = frozenset(),
    ) -> FusionNode:
        if not budget.consume():
            return FusionNode.make_leaf(ingredient, truncated=True)

        if policy.fuse_rank_limit is not None and ingredient.rank <= policy.fuse_rank_limit:
            return FusionNode.make_leaf(ingredient)

        item = self._index.lookup(ingredient.name)
        if item is None:
            return FusionNode.make_leaf(ingredient, missing=True)

        if policy.store_level is not None and price_at_store(item, policy.store_level).purchasable:
            return FusionNode.make_leaf(ingredient)

        if item.key in visited:
            return FusionNode.make_leaf(ingredient, cycle=True)

        recipes = sort_recipes(item.recipes)
        if not recipes:
            return FusionNode.make_leaf(ingredient)

        # Each child gets this path's keys; siblings never see each other's.
        path = visited | {item.key}

        if not policy.active:
            return self._branch(ingredient, recipes[0], self._expand_pair(recipes[0], policy, budget, path))

        fallback: tuple[Recipe, list[FusionNode]] | None = None
        for recipe in recipes:
            pair = self._expand_pair(recipe, policy, budget, path)
            if fallback is None:
                fallback = (recipe, pair)
            if self._satisfies(pair, policy):
                return self._branch(ingredient, recipe, pair)

        assert fallback is not None
        return self._branch(ingredient, *fallback)

    def _expand_pair(
        self,
        recipe: Recipe,
        policy: FusionPolicy,
        budget: NodeBudget,
        path: VisitedKeys,
    ) -> list[FusionNode]:
        return [self.expand(ing, policy, budget, path) for ing in recipe.ingredients]

    def _satisfies(self, pair: list[FusionNode], policy: FusionPolicy) -> bool:
        if policy.fuse_rank_limit is not None:
            return all_leaves_within_rank(pair, policy.fuse_rank_limit)
        if policy.store_level is not None:
            return all_leaves_purchasable(pair, self._index, policy.store_level)
        return True

    @staticmethod
    def _branch(ingredient: Ingredient, recipe: Recipe, pair: list[FusionNode]) -> FusionNode:
        return FusionNode(name=ingredient.name, rank=ingredient.rank, children=pair, recipe=recipe)
