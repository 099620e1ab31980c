"""Parse the fusion FAQ (saved HTML or plain text) into dataset records.

The FAQ lists items under numbered headers, each optionally followed by a
stat block and any number of two-ingredient recipe lines::

    1.4.2 - Battle Axe (Rank 5) - A heavy axe
    ooooooooooooooooooooo
    | ATK 40 / HIT 5 |

    Iron Axe (R4) + Ingot (Rank 1)
"""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
import re
from typing import Any

from fusehelper.data.dataset import parse_dataset
from fusehelper.data.models import Item

from .categories import category_for_name, category_for_section, category_for_title, group_of

logger = logging.getLogger(__name__)

_PRE_RE = re.compile(r"<pre[^>]*>(.*?)</pre>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_HEADER_RE = re.compile(
    r"^\s*(\d+\.\d+\.\d+)\s*-\s*(.+?)\s*\(\s*Rank\s*(\d+)\s*\)\s*(?:-\s*(.*))?$",
    re.IGNORECASE,
)
_GROUP_TITLE_RE = re.compile(r"^\s*(\d+\.\d+)\s*-\s*(.+?)\s*$")
_RANK_IN_HEADER_RE = re.compile(r"\(\s*Rank\s*\d+\s*\)", re.IGNORECASE)
_STATS_RULE_RE = re.compile(r"^[oO0\-=_]{5,}$")
_STAT_RE = re.compile(r"([A-Z][A-Z0-9 ]+)\s+(-?\d+)", re.IGNORECASE)
_INGREDIENT_RANK_RE = re.compile(r"\(\s*R(?:ank)?\s*(\d+)\s*\)", re.IGNORECASE)
_SECTION_REF_RE = re.compile(r"\d+\.\d+\.\d+\s*-")
_RANK_UP_RE = re.compile(r"rank\s*up\s*item", re.IGNORECASE)
_RANK_UP_FOR_RE = re.compile(r"for\s*:\s*(.+)$", re.IGNORECASE | re.DOTALL)


def extract_text(document: str) -> str:
    """Plain text of the FAQ: the ``<pre>`` blocks when present, else the whole page."""
    pieces = _PRE_RE.findall(document)
    if pieces:
        text = "\n".join(_TAG_RE.sub("", piece) for piece in pieces)
    else:
        text = _TAG_RE.sub("", document)
    return html.unescape(text).replace("\r\n", "\n")


def group_titles(lines: list[str]) -> dict[str, str]:
    """Map chapter groups (``"5.2"``) to a category from their titles."""
    titles: dict[str, str] = {}
    for raw in lines:
        line = raw.rstrip()
        if _RANK_IN_HEADER_RE.search(line):
            continue
        match = _GROUP_TITLE_RE.match(line)
        if not match:
            continue
        category = category_for_title(match.group(2))
        if category and match.group(1) not in titles:
            titles[match.group(1)] = category
    return titles


def parse_stats_line(line: str) -> dict[str, int]:
    inner = line.strip().strip("|").strip()
    stats: dict[str, int] = {}
    for part in inner.split("/"):
        match = _STAT_RE.search(part.strip())
        if match:
            stats[match.group(1).strip()] = int(match.group(2))
    return stats


def parse_recipe_line(line: str) -> dict[str, Any] | None:
    if "+" not in line or "=" in line:
        return None
    parts = line.split("+")
    if len(parts) != 2:
        return None
    left, right = (p.strip() for p in parts)
    if _SECTION_REF_RE.search(left) or _SECTION_REF_RE.search(right):
        return None
    left_rank = _INGREDIENT_RANK_RE.search(left)
    right_rank = _INGREDIENT_RANK_RE.search(right)
    if not left_rank or not right_rank:
        return None
    return {
        "ingredients": [
            {"name": _INGREDIENT_RANK_RE.sub("", left).strip(), "rank": int(left_rank.group(1))},
            {"name": _INGREDIENT_RANK_RE.sub("", right).strip(), "rank": int(right_rank.group(1))},
        ]
    }


def _new_record(match: re.Match[str], titles: dict[str, str]) -> dict[str, Any]:
    section = match.group(1)
    description = (match.group(4) or "").strip()
    item_type = category_for_section(section, titles)

    rank_up_for: list[str] = []
    for_match = _RANK_UP_FOR_RE.search(description)
    if for_match:
        rank_up_for = [p.strip() for p in re.split(r"[/,]", for_match.group(1)) if p.strip()]

    rank_up = bool(_RANK_UP_RE.search(description)) or group_of(section) == "5.3" or item_type == "rankup"
    return {
        "name": match.group(2).strip(),
        "rank": int(match.group(3)),
        "description": description or None,
        "stats": None,
        "recipes": [],
        "type": item_type,
        "rankUp": rank_up or None,
        "rankUpFor": rank_up_for or None,
        "section": section,
    }


def parse_guide(text: str) -> list[dict[str, Any]]:
    """Parse FAQ text into raw item records (``None`` marks an absent field)."""
    lines = text.split("\n")
    titles = group_titles(lines)
    records: list[dict[str, Any]] = []
    current: dict[str, Any] | None = None
    in_stats = False

    for raw in lines:
        line = raw.rstrip()

        header = _HEADER_RE.match(line)
        if header:
            current = _new_record(header, titles)
            records.append(current)
            in_stats = False
            continue
        if current is None:
            continue

        if _STATS_RULE_RE.match(re.sub(r"\s+", "", line)):
            in_stats = True
            continue
        if in_stats and "|" in line:
            stats = parse_stats_line(line)
            if stats:
                current["stats"] = {**(current["stats"] or {}), **stats}
            continue
        if in_stats and not line.strip():
            in_stats = False
            continue

        recipe = parse_recipe_line(line)
        if recipe:
            current["recipes"].append(recipe)

    for record in records:
        if not record["type"]:
            record["type"] = category_for_name(record["name"])
    return [{k: v for k, v in record.items() if v is not None} for record in records]


def build_dataset(source: Path) -> list[Item]:
    text = extract_text(source.read_text(encoding="utf-8"))
    records = parse_guide(text)
    items = parse_dataset({"items": records}, source=str(source))
    logger.info("[Ingest] Parsed %s items from %s", len(items), source)
    return items


def write_dataset(items: list[Item], output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    payload = {"items": [item.to_dict() for item in items]}
    output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("[Ingest] Wrote %s items to %s", len(items), output)
