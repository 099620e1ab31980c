"""Category tables used when deriving item types from the FAQ.

Rules are evaluated top to bottom and the first match wins, so more
specific categories (katana) precede broader ones (sword).
"""

from __future__ import annotations

from collections.abc import Callable
import re

WordPredicate = Callable[[list[str], str], bool]
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def _any_word(*words: str) -> WordPredicate:
    wanted = set(words)
    return lambda title_words, _title: any(w in wanted for w in title_words)


def _rank_up_title(title_words: list[str], title: str) -> bool:
    return "class" in title_words or "change" in title_words or "rank up" in title


TITLE_RULES: tuple[tuple[WordPredicate, str], ...] = (
    (_any_word("katana", "katanas"), "katana"),
    (_any_word("sword", "swords"), "sword"),
    (_any_word("bow", "bows"), "bow"),
    (_any_word("axe", "axes"), "axe"),
    (_any_word("spear", "spears"), "spear"),
    (_any_word("knife", "knives"), "knife"),
    (_any_word("gauntlet", "gauntlets", "glove", "gloves", "mittens"), "glove"),
    (_any_word("shoe", "shoes", "boot", "boots"), "shoe"),
    (_any_word("staff", "staves", "rod", "rods", "wand", "wands"), "staff"),
    (_any_word("agryrion"), "agryrion"),
    (_any_word("helmet", "helmets"), "helmet"),
    (_any_word("hat", "hats"), "hat"),
    (_any_word("robe", "robes"), "robe"),
    (_any_word("armor", "armors", "armour", "mail", "mails"), "armor"),
    (_any_word("shield", "shields"), "shield"),
    (_any_word("ring", "rings"), "ring"),
    (_any_word("amulet", "amulets"), "amulet"),
    (_any_word("accessory", "accessories"), "accessory"),
    (_any_word("scroll", "scrolls"), "scroll"),
    (_rank_up_title, "rankup"),
    (_any_word("recovery"), "recovery"),
)

# Weapon chapters (1.x) are numbered consistently; their titles are not.
WEAPON_GROUPS = {
    1: "katana",
    2: "sword",
    3: "bow",
    4: "axe",
    5: "spear",
    6: "knife",
    7: "glove",
    8: "staff",
    9: "agryrion",
}

FIXED_GROUPS = {
    "4.2": "glove",
    "4.3": "shoe",
    "5.2": "scroll",
    "5.3": "rankup",
}

# Used only when the table of contents has no usable title for the group.
FALLBACK_GROUPS = {"4.1": "shield"}

# Substring keywords on item names, used only for items still untyped.
NAME_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("helmet", "hat", "turban", "mask", "hachimaki", "hachigane"), "helmet"),
    (("robe", "garb", "shawl"), "robe"),
    (("mail", "armor", "armour", "plate"), "armor"),
    (("shield",), "shield"),
    (("ring", "charm", "amulet", "talisman", "anklet", "earrings"), "accessory"),
    (("boots", "shoes"), "shoe"),
    (("potion", "elixir", "antidote", "holy water", "whistle"), "recovery"),
)


def _words(text: str) -> list[str]:
    return [w for w in _NON_ALNUM_RE.split(text.lower()) if w]


def category_for_title(title: str) -> str | None:
    lowered = (title or "").lower()
    words = _words(lowered)
    for predicate, category in TITLE_RULES:
        if predicate(words, lowered):
            return category
    return None


def group_of(section: str) -> str | None:
    """``"1.6.8"`` → ``"1.6"``; None for sections without three parts."""
    parts = section.split(".")
    if len(parts) < 3:
        return None
    return f"{parts[0]}.{parts[1]}"


def category_for_section(section: str, group_titles: dict[str, str]) -> str | None:
    group = group_of(section)
    if group is None:
        return None
    major, minor = group.split(".")
    if major == "1":
        return WEAPON_GROUPS.get(int(minor)) if minor.isdigit() else None
    return FIXED_GROUPS.get(group) or group_titles.get(group) or FALLBACK_GROUPS.get(group)


def category_for_name(name: str) -> str | None:
    lowered = (name or "").lower()
    for keywords, category in NAME_RULES:
        if any(k in lowered for k in keywords):
            return category
    return None
