"""Item search and detail endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from fusehelper.bootstrap import get_container

router = APIRouter()


@router.get("/items/search")
async def search_items(q: str, limit: int | None = None, full: bool = False) -> dict[str, Any]:
    try:
        return get_container().fuse.search(q, limit=limit, full=full)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/items/detail")
async def item_detail(name: str) -> dict[str, Any]:
    summary = get_container().fuse.describe(name)
    if summary is None:
        raise HTTPException(status_code=404, detail=f"No single item matches '{name}'")
    return summary
