"""Typo-tolerant item matching with rank and category qualifiers.

Handles queries like "batle axe" (typo), "axe r5" (every axe of rank 5),
"battle axe rank 6" (the family of an exact name at another rank) by:
- Parsing rank qualifiers ("r8", "rank 8", or a trailing number)
- Inferring a category boost from exact or near-miss type words
- Refusing to guess when a rank is given without a resolvable type
- Scoring every item on prefix, containment, token and edit-distance signals
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
import re
from typing import Any

from fusehelper.core.text import normalize, tokenize, typo_distance

from .catalog import CatalogIndex, IndexEntry
from .models import Item

logger = logging.getLogger(__name__)

RANK_QUALIFIER_RE = re.compile(r"\b(?:rank\s*(\d+)|r\s*(\d+))\b", re.IGNORECASE)
TRAILING_NUMBER_RE = re.compile(r"(\d+)\s*$")

EXACT_SCORE = 1000
RANK_MATCH_SCORE = 999
TYPE_BOOST_BONUS = 120
MAX_TYPE_DISTANCE = 2

# Scoring weights
PREFIX_BONUS = 400
CONTAINS_BONUS = 220
TOKEN_EQUAL_BONUS = 60
TOKEN_PREFIX_BONUS = 40
WHOLE_NAME_SIMILARITY = 220
TOKEN_SIMILARITY = 120


@dataclass(frozen=True)
class Suggestion:
    item: Item
    score: int


@dataclass
class SearchResult:
    """Outcome of a query: an exact item, ranked candidates, or nothing."""
    query: str
    exact: list[Item] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    requested_rank: int | None = None
    type_boost: str | None = None

    @property
    def selected(self) -> Item | None:
        """The exact match, or the only suggestion when there is just one."""
        if self.exact:
            return self.exact[0]
        if len(self.suggestions) == 1:
            return self.suggestions[0].item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "requested_rank": self.requested_rank,
            "type_boost": self.type_boost,
            "exact": [item.to_dict() for item in self.exact],
            "suggestions": [
                {"item": s.item.to_dict(), "score": s.score}
                for s in self.suggestions
            ],
        }


def parse_rank_query(raw: str) -> tuple[int | None, str]:
    """Split a rank qualifier off a query.

    Returns (rank, residual text). Supported formats:
        "katana r7"      → (7, "katana ")
        "rank 8 robe"    → (8, " robe")
        "battle axe 6"   → (6, "battle axe ")
        "battle axe"     → (None, "battle axe")
    """
    text = str(raw)
    match = RANK_QUALIFIER_RE.search(text)
    if match:
        rank = int(match.group(1) or match.group(2))
        return rank, RANK_QUALIFIER_RE.sub(" ", text)

    match = TRAILING_NUMBER_RE.search(text.strip())
    if match:
        stripped = text.strip()
        return int(match.group(1)), stripped[: match.start()]

    return None, text


def infer_type_boost(tokens: list[str], known_types: list[str]) -> str | None:
    """Pick a category from the query words, tolerating small typos."""
    known = set(known_types)
    for tok in tokens:
        if tok in known:
            return tok

    best: str | None = None
    best_distance = math.inf
    for tok in tokens:
        for candidate in known_types:
            distance = typo_distance(tok, candidate)
            if distance < best_distance:
                best_distance = distance
                best = candidate
    return best if best_distance <= MAX_TYPE_DISTANCE else None


def score_candidate(entry: IndexEntry, query: str, query_tokens: list[str]) -> int:
    """Ordinal match score; only meaningful for comparing candidates."""
    name = entry.normalized_name
    if name == query:
        return EXACT_SCORE

    score = 0
    if name.startswith(query):
        score += PREFIX_BONUS
    if query in name:
        score += CONTAINS_BONUS

    for qt in query_tokens:
        for tok in entry.tokens:
            if tok.startswith(qt):
                score += TOKEN_PREFIX_BONUS
            if tok == qt:
                score += TOKEN_EQUAL_BONUS

    if query:
        distance = typo_distance(name, query)
        max_len = max(len(name), len(query)) or 1
        score += math.floor((1 - distance / max_len) * WHOLE_NAME_SIMILARITY)

    if entry.tokens:
        for qt in query_tokens:
            best_distance, best_token = min(
                ((typo_distance(tok, qt), tok) for tok in entry.tokens),
                key=lambda pair: pair[0],
            )
            max_len = max(len(qt), len(best_token), 1)
            similarity = 1 - min(best_distance / max_len, 1)
            score += math.floor(similarity * TOKEN_SIMILARITY)

    return score


class ItemMatcher:
    """Resolves free-text queries against a catalog index."""

    def __init__(self, index: CatalogIndex) -> None:
        self._index = index

    def search(self, raw_query: str, limit: int = 5) -> SearchResult:
        query = normalize(raw_query)
        result = SearchResult(query=query)
        if not query:
            return result

        limit = max(limit, 0)
        rank, residual = parse_rank_query(raw_query)
        name_query = normalize(residual)
        name_tokens = tokenize(residual)
        type_boost = infer_type_boost(name_tokens, self._index.known_types)
        result.requested_rank = rank
        result.type_boost = type_boost

        # Names may end in a number ("Elixir 2"); the full name beats a rank qualifier.
        exact = self._index.name_map.get(query)
        if exact is not None:
            result.exact = [exact]
            return result

        if rank is not None:
            return self._rank_qualified(result, name_query, type_boost, rank, limit)

        query_tokens = name_tokens or tokenize(raw_query)
        scored: list[Suggestion] = []
        for entry in self._index.entries:
            score = score_candidate(entry, name_query or query, query_tokens)
            if type_boost and entry.item.type == type_boost:
                score += TYPE_BOOST_BONUS
            scored.append(Suggestion(item=entry.item, score=score))

        scored.sort(key=lambda s: -s.score)
        result.suggestions = scored[:limit]
        return result

    def _rank_qualified(
        self,
        result: SearchResult,
        name_query: str,
        type_boost: str | None,
        rank: int,
        limit: int,
    ) -> SearchResult:
        named = self._index.name_map.get(name_query) if name_query else None
        target_type = (named.type if named is not None else None) or type_boost
        if not target_type:
            # A bare rank with no category would match half the catalog.
            logger.debug("[Matcher] Rank %s requested without a resolvable type", rank)
            return result

        pool = self._index.items_by_type_and_rank(target_type, rank)
        result.suggestions = [Suggestion(item=item, score=RANK_MATCH_SCORE) for item in pool[:limit]]
        return result


def search(index: CatalogIndex, raw_query: str, limit: int = 5) -> SearchResult:
    return ItemMatcher(index).search(raw_query, limit)
