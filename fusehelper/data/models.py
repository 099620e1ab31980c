"""Catalog record models.

Items are validated once at load time and treated as immutable afterwards.
Field names follow the dataset's camelCase keys through aliases, so both
``rankUp`` and ``rank_up`` are accepted.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fusehelper.core.text import tokenize

logger = logging.getLogger(__name__)

INGREDIENTS_PER_RECIPE = 2

PriceSpec = int | float | list[int | float | None] | None

_RECORD_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Ingredient(BaseModel):
    """Reference to another catalog item by display name and rank."""

    model_config = _RECORD_CONFIG

    name: str = ""
    rank: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("rank", mode="before")
    @classmethod
    def _coerce_rank(cls, value: Any) -> int:
        return 0 if value is None else value

    @property
    def key(self) -> tuple[str, int]:
        return self.name, self.rank


class Recipe(BaseModel):
    """A fusion of exactly two ingredients."""

    model_config = _RECORD_CONFIG

    ingredients: tuple[Ingredient, Ingredient] = Field(default=(), validate_default=True)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _exactly_two(cls, value: Any) -> list[Any]:
        parts = list(value or [])
        if len(parts) > INGREDIENTS_PER_RECIPE:
            logger.warning(
                "[Dataset] Recipe has %s ingredients, keeping the first %s",
                len(parts),
                INGREDIENTS_PER_RECIPE,
            )
            parts = parts[:INGREDIENTS_PER_RECIPE]
        # Unnamed placeholders never resolve, so they surface as missing leaves.
        while len(parts) < INGREDIENTS_PER_RECIPE:
            parts.append({"name": "", "rank": 0})
        return parts

    @property
    def left(self) -> Ingredient:
        return self.ingredients[0]

    @property
    def right(self) -> Ingredient:
        return self.ingredients[1]


class Item(BaseModel):
    """A craftable (or purchasable) catalog item."""

    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    rank: int = Field(ge=1)
    type: str | None = None
    stats: dict[str, int] | None = None
    description: str | None = None
    rank_up: bool | None = Field(default=None, alias="rankUp")
    rank_up_for: list[str] | None = Field(default=None, alias="rankUpFor")
    recipes: list[Recipe] = Field(default_factory=list)
    section: str | None = None
    price: PriceSpec = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, value: Any) -> str | None:
        if value is None:
            return None
        # Single token: "Rank Up" -> "rankup".
        text = "".join(tokenize(value))
        return text or None

    @field_validator("recipes", mode="before")
    @classmethod
    def _absent_recipes(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def key(self) -> tuple[str, int]:
        return self.name, self.rank

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class DatasetFile(BaseModel):
    """Top-level dataset shape: an object with an ``items`` array.

    Entries are kept raw here so that one bad record can be skipped
    without rejecting the whole file.
    """

    model_config = ConfigDict(extra="ignore")

    items: list[Any]
