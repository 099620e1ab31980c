"""Dataset loading.

The dataset is a JSON object with a single ``items`` array. A file that is
missing, unreadable, not JSON, or lacks that array is fatal; individual
records that fail validation are skipped and logged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .catalog import CatalogIndex
from .config import FuseDataConfig
from .download import ensure_dataset_file
from .models import DatasetFile, Item

logger = logging.getLogger(__name__)


class DatasetError(RuntimeError):
    """Raised when no usable dataset can be loaded."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def parse_dataset(raw: Any, *, source: str = "<memory>") -> list[Item]:
    """Validate the top-level shape and build items, skipping bad records."""
    try:
        dataset = DatasetFile.model_validate(raw)
    except ValidationError as exc:
        raise DatasetError(f"Dataset {source} has no 'items' array") from exc

    items: list[Item] = []
    for position, record in enumerate(dataset.items):
        try:
            items.append(Item.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "[Dataset] Skipping record %s in %s: %s",
                position,
                source,
                exc.errors()[0]["msg"] if exc.errors() else exc,
            )
    return items


def load_dataset(path: Path) -> list[Item]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatasetError(f"Cannot read dataset {path}: {exc}", path=path) from exc
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Dataset {path} is not valid JSON: {exc}", path=path) from exc

    try:
        items = parse_dataset(raw, source=str(path))
    except DatasetError as exc:
        exc.path = path
        raise
    logger.info("[Dataset] Loaded %s items from %s", len(items), path)
    return items


def locate_dataset(config: FuseDataConfig | None = None) -> Path:
    """Find the dataset file, downloading it when a URL is configured."""
    config = config or FuseDataConfig()
    if config.path is not None:
        if not config.path.exists():
            raise DatasetError(f"Dataset not found: {config.path}", path=config.path)
        return config.path

    for candidate in config.candidates:
        if candidate.exists():
            return candidate

    if config.url and config.candidates:
        try:
            return ensure_dataset_file(config.candidates[0], config.url, timeout_s=config.download_timeout_s)
        except Exception as exc:
            raise DatasetError(f"Failed to download dataset from {config.url}: {exc}") from exc

    tried = ", ".join(str(p) for p in config.candidates)
    raise DatasetError(f"Data file not found: tried {tried}")


class ItemDatabase:
    """Lazily loaded catalog: items plus the derived index."""

    def __init__(self, data_path: Path | None = None, *, items: list[Item] | None = None) -> None:
        self._data_path = data_path
        self._items: list[Item] = list(items) if items is not None else []
        self._index: CatalogIndex | None = CatalogIndex.build(self._items) if items is not None else None
        self._source: Path | None = None

    def ensure_loaded(self) -> None:
        if self._index is not None:
            return
        path = self._data_path or locate_dataset()
        self._items = load_dataset(path)
        self._source = path
        self._index = CatalogIndex.build(self._items)

    def reload(self) -> None:
        """Re-read the dataset and rebuild the index."""
        self._index = None
        self.ensure_loaded()

    @property
    def items(self) -> list[Item]:
        self.ensure_loaded()
        return self._items

    @property
    def index(self) -> CatalogIndex:
        self.ensure_loaded()
        assert self._index is not None
        return self._index

    @property
    def source(self) -> Path | None:
        return self._source
