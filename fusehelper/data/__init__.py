"""Catalog data, matching and fusion resolution."""

from .catalog import CatalogIndex, IndexEntry
from .config import FuseDataConfig, ResolverConfig, WebConfig
from .dataset import DatasetError, ItemDatabase, load_dataset, locate_dataset, parse_dataset
from .fusion import FusionNode, FusionPolicy, FusionResolver, NodeBudget
from .matcher import ItemMatcher, SearchResult, Suggestion, search
from .models import Ingredient, Item, Recipe
from .pricing import StorePrice, price_at_store
from .recipes import recipe_label, sort_recipes
from .totals import LeafRef, TotalsRow, TotalsTable, collect_leaves, totals

__all__ = [
    "CatalogIndex",
    "IndexEntry",
    "FuseDataConfig",
    "ResolverConfig",
    "WebConfig",
    "DatasetError",
    "ItemDatabase",
    "load_dataset",
    "locate_dataset",
    "parse_dataset",
    "FusionNode",
    "FusionPolicy",
    "FusionResolver",
    "NodeBudget",
    "ItemMatcher",
    "SearchResult",
    "Suggestion",
    "search",
    "Ingredient",
    "Item",
    "Recipe",
    "StorePrice",
    "price_at_store",
    "recipe_label",
    "sort_recipes",
    "LeafRef",
    "TotalsRow",
    "TotalsTable",
    "collect_leaves",
    "totals",
]
