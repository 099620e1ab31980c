"""Dependency composition root."""

from __future__ import annotations

from dataclasses import dataclass

from fusehelper.application.fusion_service import FuseApplicationService
from fusehelper.data.config import ResolverConfig
from fusehelper.data.dataset import ItemDatabase


@dataclass(frozen=True)
class AppContainer:
    """Wired application dependencies."""

    database: ItemDatabase
    fuse: FuseApplicationService


_CONTAINER: AppContainer | None = None


def get_container() -> AppContainer:
    global _CONTAINER
    if _CONTAINER is not None:
        return _CONTAINER

    database = ItemDatabase()
    _CONTAINER = AppContainer(
        database=database,
        fuse=FuseApplicationService(database=database, config=ResolverConfig()),
    )
    return _CONTAINER
