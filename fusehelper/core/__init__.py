"""Pure text utilities shared by the matcher and the index."""

from .text import levenshtein, normalize, osa_distance, tokenize, typo_distance

__all__ = [
    "levenshtein",
    "normalize",
    "osa_distance",
    "tokenize",
    "typo_distance",
]
