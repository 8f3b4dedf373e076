# backend/modules/kitchen/schemas/__init__.py

from .kitchen_schemas import (
    CookRequest,
    KitchenOrderRef,
    KitchenItemResponse,
    CookItemsResponse,
    RejectResponse,
    RosterEntryResponse,
    AssignmentPair,
    RebalanceResponse,
)

__all__ = [
    "CookRequest",
    "KitchenOrderRef",
    "KitchenItemResponse",
    "CookItemsResponse",
    "RejectResponse",
    "RosterEntryResponse",
    "AssignmentPair",
    "RebalanceResponse",
]
