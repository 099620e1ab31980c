"""Application layer services."""

from .fusion_service import FuseApplicationService, FusionResult, describe_item

__all__ = [
    "FuseApplicationService",
    "FusionResult",
    "describe_item",
]
