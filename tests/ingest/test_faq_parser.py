"""Tests for FAQ ingestion."""

import pytest

from fusehelper.data.dataset import load_dataset
from fusehelper.ingest.categories import (
    category_for_name,
    category_for_section,
    category_for_title,
    group_of,
)
from fusehelper.ingest.faq_parser import (
    build_dataset,
    extract_text,
    parse_guide,
    parse_recipe_line,
    parse_stats_line,
    write_dataset,
)

GUIDE = """\
1.2 - Swords
1.2.1 - Iron Sword (Rank 3) - A plain blade
ooooooooooooooooo
| ATK 12 / HIT 3 |

Ingot (R1) + Ingot (Rank 1)

1.2.2 - Flame Sword (Rank 6)
Iron Sword (R3) + Fire Stone (R3)
See 1.2.1 - Iron Sword + Fire Stone (R3)
3.1 - Shields and more
3.1.1 - Kite Shield (Rank 4)
4.1 - Misc
4.1.1 - Buckler (Rank 2)
5.3 - Rank Up Items
5.3.1 - Whetstone (Rank 2) - Rank up item for: Katana / Sword
6.1 - Odds and ends
6.1.1 - Healing Potion (Rank 1)
6.1.2 - Broken Entry (Rank 0)
"""


@pytest.fixture
def records():
    return {r["name"]: r for r in parse_guide(GUIDE)}


def test_headers_become_records(records):
    assert list(records) == [
        "Iron Sword",
        "Flame Sword",
        "Kite Shield",
        "Buckler",
        "Whetstone",
        "Healing Potion",
        "Broken Entry",
    ]
    assert records["Iron Sword"]["rank"] == 3
    assert records["Iron Sword"]["section"] == "1.2.1"
    assert records["Iron Sword"]["description"] == "A plain blade"


def test_stats_and_recipes(records):
    sword = records["Iron Sword"]
    assert sword["stats"] == {"ATK": 12, "HIT": 3}
    assert sword["recipes"] == [
        {"ingredients": [{"name": "Ingot", "rank": 1}, {"name": "Ingot", "rank": 1}]},
    ]
    # Cross-reference lines are not recipes.
    assert len(records["Flame Sword"]["recipes"]) == 1


def test_absent_fields_are_dropped(records):
    flame = records["Flame Sword"]
    assert "description" not in flame
    assert "stats" not in flame
    assert "rankUp" not in flame


def test_categories(records):
    assert records["Iron Sword"]["type"] == "sword"
    assert records["Kite Shield"]["type"] == "shield"
    assert records["Buckler"]["type"] == "shield"
    assert records["Whetstone"]["type"] == "rankup"
    assert records["Healing Potion"]["type"] == "recovery"


def test_rank_up_for(records):
    whetstone = records["Whetstone"]
    assert whetstone["rankUp"] is True
    assert whetstone["rankUpFor"] == ["Katana", "Sword"]


@pytest.mark.parametrize("line,expected", [
    ("| ATK 40 / HIT 5 |", {"ATK": 40, "HIT": 5}),
    ("| DEF -2 |", {"DEF": -2}),
    ("| nothing here |", {}),
])
def test_parse_stats_line(line, expected):
    assert parse_stats_line(line) == expected


@pytest.mark.parametrize("line", [
    "Iron Sword + Fire Stone",
    "A (R1) + B (R2) + C (R3)",
    "A (R1) + B (R2) = C (R3)",
    "1.2.1 - Iron Sword (R3) + Ingot (R1)",
    "no plus sign at all",
])
def test_parse_recipe_line_rejects(line):
    assert parse_recipe_line(line) is None


def test_extract_text_prefers_pre_blocks():
    page = "<html><body><h1>Title</h1><pre>1.1.1 - A &amp; B (Rank 2)\n<b>x</b></pre></body></html>"
    assert extract_text(page) == "1.1.1 - A & B (Rank 2)\nx"


def test_extract_text_without_pre():
    assert extract_text("<p>Ingot (R1)\r\n</p>") == "Ingot (R1)\n"


@pytest.mark.parametrize("title,expected", [
    ("Katanas", "katana"),
    ("Long Swords", "sword"),
    ("Gauntlets & Gloves", "glove"),
    ("Class Change Items", "rankup"),
    ("Helmets", "helmet"),
    ("Odds and ends", None),
])
def test_category_for_title(title, expected):
    assert category_for_title(title) == expected


def test_category_for_section():
    assert group_of("1.6.8") == "1.6"
    assert group_of("1.6") is None
    assert category_for_section("1.6.8", {}) == "knife"
    assert category_for_section("4.2.1", {"4.2": "shield"}) == "glove"
    assert category_for_section("4.1.1", {"4.1": "ring"}) == "ring"
    assert category_for_section("4.1.1", {}) == "shield"
    assert category_for_section("7.7.7", {}) is None


def test_category_for_name():
    assert category_for_name("Silver Talisman") == "accessory"
    assert category_for_name("Leather Boots") == "shoe"
    assert category_for_name("Mystery") is None


def test_build_and_write_dataset(tmp_path):
    source = tmp_path / "faq.html"
    source.write_text(f"<html><pre>{GUIDE}</pre></html>", encoding="utf-8")

    items = build_dataset(source)
    names = [item.name for item in items]
    # Rank 0 is not a valid rank.
    assert "Broken Entry" not in names
    assert len(items) == 6

    output = tmp_path / "out" / "sdfh_item_data.json"
    write_dataset(items, output)
    reloaded = load_dataset(output)
    assert [item.name for item in reloaded] == names
    whetstone = next(item for item in reloaded if item.name == "Whetstone")
    assert whetstone.rank_up_for == ["Katana", "Sword"]
