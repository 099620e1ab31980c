"""Deterministic "simplest first" recipe ordering."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Ingredient, Recipe


def _sort_key(recipe: Recipe) -> tuple[int, int, str]:
    ranks = [ing.rank for ing in recipe.ingredients]
    return max(ranks, default=0), sum(ranks), f"{recipe.left.name} + {recipe.right.name}"


def sort_recipes(recipes: Iterable[Recipe] | None) -> list[Recipe]:
    """Order by highest ingredient rank, then rank sum, then ingredient names."""
    return sorted(recipes or [], key=_sort_key)


def ingredient_label(ingredient: Ingredient) -> str:
    if ingredient.rank:
        return f"{ingredient.name} (R{ingredient.rank})"
    return ingredient.name


def recipe_label(recipe: Recipe) -> str:
    return " + ".join(ingredient_label(ing) for ing in recipe.ingredients)
