"""HTTP application entrypoint (composition-only)."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fusehelper.bootstrap import get_container
from fusehelper.data.config import WebConfig
from fusehelper.web.routers import fusion_router, items_router, system_router

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # A missing or malformed catalog fails startup rather than the first request.
    database = get_container().database
    database.ensure_loaded()
    logger.info("[Web] Catalog ready: %s items", len(database.items))
    yield


app = FastAPI(title="Fuse Helper", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(WebConfig().cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system_router)
app.include_router(items_router)
app.include_router(fusion_router)

__all__ = ["app"]
