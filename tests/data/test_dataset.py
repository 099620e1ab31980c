"""Tests for dataset validation and loading."""

import json
from pathlib import Path

import pytest

from fusehelper.data.config import FuseDataConfig
from fusehelper.data.dataset import DatasetError, ItemDatabase, load_dataset, locate_dataset, parse_dataset
from fusehelper.data.models import Item, Recipe


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestParseDataset:

    def test_accepts_minimal_items(self):
        items = parse_dataset({"items": [{"name": "Ingot", "rank": 1}]})
        assert len(items) == 1
        assert items[0].recipes == []
        assert items[0].type is None

    @pytest.mark.parametrize("raw", [[], {"things": []}, {"items": {"name": "x"}}, "items", None])
    def test_rejects_wrong_shape(self, raw):
        with pytest.raises(DatasetError):
            parse_dataset(raw)

    def test_skips_invalid_records(self, caplog):
        items = parse_dataset({
            "items": [
                {"name": "Ingot", "rank": 1},
                {"name": "", "rank": 2},
                {"name": "Zero", "rank": 0},
                "not a record",
                {"name": "Fire Stone", "rank": 3},
            ]
        })
        assert [i.name for i in items] == ["Ingot", "Fire Stone"]
        assert "Skipping record" in caplog.text

    def test_camel_case_fields_and_type_lowercasing(self):
        item = parse_dataset({
            "items": [{
                "name": "Hero Crest",
                "rank": 4,
                "type": " RankUp ",
                "rankUp": True,
                "rankUpFor": ["Knight", "Mage"],
                "recipes": None,
            }]
        })[0]
        assert item.type == "rankup"
        assert item.rank_up is True
        assert item.rank_up_for == ["Knight", "Mage"]
        assert item.recipes == []

    def test_recipe_always_has_two_ingredients(self):
        short = Recipe.model_validate({"ingredients": [{"name": "Ingot", "rank": 1}]})
        assert short.left.name == "Ingot"
        assert short.right.name == ""
        assert short.right.rank == 0

        long = Recipe.model_validate({
            "ingredients": [{"name": "A", "rank": 1}, {"name": "B", "rank": 2}, {"name": "C", "rank": 3}]
        })
        assert [i.name for i in long.ingredients] == ["A", "B"]

    def test_recipe_without_ingredients_keeps_item(self):
        items = parse_dataset({"items": [{"name": "Charm", "rank": 2, "recipes": [{}]}]})
        assert [i.name for i in items] == ["Charm"]
        (recipe,) = items[0].recipes
        assert [(i.name, i.rank) for i in recipe.ingredients] == [("", 0), ("", 0)]

    @pytest.mark.parametrize("raw,expected", [
        ("Rank Up", "rankup"),
        (" RankUp ", "rankup"),
        ("Axe", "axe"),
        ("  ", None),
    ])
    def test_type_is_one_lowercase_token(self, raw, expected):
        assert Item.model_validate({"name": "Crest", "rank": 1, "type": raw}).type == expected

    def test_items_are_immutable(self):
        item = Item.model_validate({"name": "Ingot", "rank": 1})
        with pytest.raises(Exception):
            item.rank = 2


class TestLoadDataset:

    def test_load_from_file(self, tmp_path):
        path = _write(tmp_path / "data.json", {"items": [{"name": "Ingot", "rank": 1, "price": 10}]})
        items = load_dataset(path)
        assert items[0].price == 10

    def test_invalid_json_is_fatal(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DatasetError) as exc_info:
            load_dataset(path)
        assert exc_info.value.path == path

    def test_missing_items_array_is_fatal(self, tmp_path):
        path = _write(tmp_path / "data.json", {"records": []})
        with pytest.raises(DatasetError, match="items"):
            load_dataset(path)

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(DatasetError):
            load_dataset(tmp_path / "absent.json")


class TestLocateDataset:

    def test_explicit_path_wins(self, tmp_path):
        explicit = _write(tmp_path / "explicit.json", {"items": []})
        candidate = _write(tmp_path / "candidate.json", {"items": []})
        config = FuseDataConfig(path=explicit, candidates=(candidate,), url=None)
        assert locate_dataset(config) == explicit

    def test_explicit_path_missing(self, tmp_path):
        config = FuseDataConfig(path=tmp_path / "nope.json", candidates=(), url=None)
        with pytest.raises(DatasetError):
            locate_dataset(config)

    def test_first_existing_candidate(self, tmp_path):
        second = _write(tmp_path / "second.json", {"items": []})
        config = FuseDataConfig(path=None, candidates=(tmp_path / "first.json", second), url=None)
        assert locate_dataset(config) == second

    def test_nothing_found(self, tmp_path):
        config = FuseDataConfig(path=None, candidates=(tmp_path / "a.json",), url=None)
        with pytest.raises(DatasetError, match="not found"):
            locate_dataset(config)


class TestItemDatabase:

    def test_lazy_load_and_reload(self, tmp_path):
        path = _write(tmp_path / "data.json", {"items": [{"name": "Ingot", "rank": 1}]})
        db = ItemDatabase(path)
        assert db.source is None
        assert db.index.lookup("ingot").name == "Ingot"
        assert db.source == path

        _write(path, {"items": [{"name": "Ingot", "rank": 1}, {"name": "Fire Stone", "rank": 3}]})
        db.reload()
        assert len(db.items) == 2
        assert db.index.lookup("FIRE STONE") is not None

    def test_in_memory_items(self):
        db = ItemDatabase(items=[Item.model_validate({"name": "Ingot", "rank": 1})])
        assert len(db.index) == 1
