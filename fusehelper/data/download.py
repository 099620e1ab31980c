"""Fetch the item dataset from a configured URL when no local copy exists."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


def ensure_dataset_file(
    target: Path,
    url: str,
    *,
    timeout_s: float = 60,
    client: httpx.Client | None = None,
) -> Path:
    """Download ``url`` to ``target`` unless the file is already present."""
    if target.exists():
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    logger.info("[Dataset] Downloading %s to %s", url, target)

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout_s, follow_redirects=True)
    partial = target.with_name(target.name + ".part")
    try:
        with http.stream("GET", url) as resp:
            resp.raise_for_status()
            with partial.open("wb") as f:
                for chunk in resp.iter_bytes(chunk_size=65536):
                    f.write(chunk)
        partial.replace(target)
    finally:
        if owns_client:
            http.close()
        partial.unlink(missing_ok=True)

    logger.info(
        "[Dataset] Saved %s (%.1f KB)",
        target.name,
        target.stat().st_size / 1024,
    )
    return target
