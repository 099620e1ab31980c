"""Shared catalog builders for the test suite."""

from typing import Any

import pytest

from fusehelper.data.catalog import CatalogIndex
from fusehelper.data.dataset import ItemDatabase
from fusehelper.data.models import Item


def recipe(left: tuple[str, int], right: tuple[str, int]) -> dict[str, Any]:
    return {"ingredients": [{"name": left[0], "rank": left[1]}, {"name": right[0], "rank": right[1]}]}


def make_items(*records: dict[str, Any]) -> list[Item]:
    return [Item.model_validate(r) for r in records]


FORGE_RECORDS = [
    {"name": "Ingot", "rank": 1, "price": 10},
    {"name": "Fire Stone", "rank": 3, "price": [None, None, 80]},
    {"name": "Iron Sword", "rank": 3, "type": "sword", "recipes": [recipe(("Ingot", 1), ("Ingot", 1))]},
    {"name": "Flame Sword", "rank": 6, "type": "sword", "recipes": [recipe(("Iron Sword", 3), ("Fire Stone", 3))]},
    {"name": "Battle Axe", "rank": 5, "type": "axe"},
    {"name": "Iron Axe", "rank": 5, "type": "axe"},
    {"name": "Great Axe", "rank": 6, "type": "axe"},
    {"name": "Silk Robe", "rank": 2, "type": "robe", "price": 150},
]


@pytest.fixture(scope="module")
def forge_items() -> list[Item]:
    return make_items(*FORGE_RECORDS)


@pytest.fixture(scope="module")
def forge_index(forge_items) -> CatalogIndex:
    return CatalogIndex.build(forge_items)


@pytest.fixture
def forge_database(forge_items) -> ItemDatabase:
    return ItemDatabase(items=forge_items)


@pytest.fixture
def build_index():
    """Factory: raw item records -> CatalogIndex."""

    def _build(*records: dict[str, Any]) -> CatalogIndex:
        return CatalogIndex.build(make_items(*records))

    return _build
