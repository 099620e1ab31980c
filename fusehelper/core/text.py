"""Text normalization and edit distances.

Both distance functions are symmetric and return 0 only for equal inputs.
``typo_distance`` takes the smaller of the two, which is what the matcher
uses when judging how close a typo is.
"""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize(text: object) -> str:
    """Strip diacritics, lowercase and collapse non-alphanumerics to single spaces."""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub(" ", stripped.lower()).strip()


def tokenize(text: object) -> list[str]:
    return [tok for tok in normalize(text).split(" ") if tok]


def levenshtein(a: str, b: str) -> int:
    """Classic insert/delete/substitute distance (single-row DP)."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        prev = row[0]
        row[0] = i
        for j in range(1, len(b) + 1):
            current = row[j]
            cost = 0 if a[i - 1] == b[j - 1] else 1
            row[j] = min(row[j] + 1, row[j - 1] + 1, prev + cost)
            prev = current
    return row[len(b)]


def osa_distance(a: str, b: str) -> int:
    """Optimal string alignment: Levenshtein plus adjacent transpositions."""
    m, n = len(a), len(b)
    if m == 0:
        return n
    if n == 0:
        return m

    d = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        d[i][0] = i
    for j in range(n + 1):
        d[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            d[i][j] = min(
                d[i - 1][j] + 1,
                d[i][j - 1] + 1,
                d[i - 1][j - 1] + cost,
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                d[i][j] = min(d[i][j], d[i - 2][j - 2] + 1)
    return d[m][n]


def typo_distance(a: str, b: str) -> int:
    return min(osa_distance(a, b), levenshtein(a, b))
