"""Fusion planning endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from fusehelper.bootstrap import get_container

router = APIRouter()


@router.get("/fusion")
async def plan_fusion(
    item: str,
    recipe: int | None = None,
    fuse_rank: int | None = None,
    store: int | None = None,
) -> dict[str, Any]:
    try:
        result = get_container().fuse.fuse(
            item,
            recipe_index=recipe,
            fuse_rank_limit=fuse_rank,
            store_level=store,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not result["found"]:
        raise HTTPException(status_code=404, detail={"message": f"No single item matches '{item}'", **result})
    return result
