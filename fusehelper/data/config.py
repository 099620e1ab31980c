"""Configuration for dataset location and resolver limits."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path

DATASET_FILENAME = "sdfh_item_data.json"
_PACKAGE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_NODE_BUDGET = 5000
DEFAULT_SEARCH_LIMIT = 5
DEFAULT_FULL_LIMIT = 50


def _get_explicit_path() -> Path | None:
    explicit = os.getenv("FUSE_DATA_PATH")
    return Path(explicit) if explicit else None


def _get_candidate_paths() -> tuple[Path, ...]:
    """Dataset locations tried in order when no explicit path is set.

    1. Working directory (``./sdfh_item_data.json``).
    2. Working directory data folder (``./data/sdfh_item_data.json``).
    3. Next to the installed package, flat or under ``data/``.
    """
    cwd = Path.cwd()
    return (
        cwd / DATASET_FILENAME,
        cwd / "data" / DATASET_FILENAME,
        _PACKAGE_DIR / DATASET_FILENAME,
        _PACKAGE_DIR / "data" / DATASET_FILENAME,
    )


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class FuseDataConfig:
    path: Path | None = field(default_factory=_get_explicit_path)
    candidates: tuple[Path, ...] = field(default_factory=_get_candidate_paths)
    url: str | None = field(default_factory=lambda: os.getenv("FUSE_DATA_URL") or None)
    download_timeout_s: float = field(default_factory=lambda: float(os.getenv("FUSE_DATA_TIMEOUT_S", "60")))


@dataclass(frozen=True)
class ResolverConfig:
    node_budget: int = field(default_factory=lambda: _get_int("FUSE_NODE_BUDGET", DEFAULT_NODE_BUDGET))
    search_limit: int = field(default_factory=lambda: _get_int("FUSE_SEARCH_LIMIT", DEFAULT_SEARCH_LIMIT))
    full_limit: int = field(default_factory=lambda: _get_int("FUSE_FULL_LIMIT", DEFAULT_FULL_LIMIT))


@dataclass(frozen=True)
class WebConfig:
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: tuple(
            o.strip()
            for o in os.getenv("FUSE_CORS_ORIGINS", "http://localhost:5173").split(",")
            if o.strip()
        )
    )
