# backend/modules/kitchen/schemas/kitchen_schemas.py

"""
Pydantic schemas for the kitchen endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.orders.enums.order_enums import OrderItemKind, OrderItemState


class CookRequest(BaseModel):
    """Body carried by every cook action"""

    cook_id: int = Field(..., gt=0)


class KitchenOrderRef(BaseModel):
    id: int
    code: Optional[str] = None
    table_no: int

    model_config = ConfigDict(from_attributes=True)


class KitchenItemResponse(BaseModel):
    id: int
    order_id: int
    name: str
    notes: Optional[str] = None
    kind: OrderItemKind
    state: OrderItemState
    cook_id: Optional[int] = None
    assigned_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    created_at: datetime
    order: Optional[KitchenOrderRef] = None

    model_config = ConfigDict(from_attributes=True)


class CookItemsResponse(BaseModel):
    """What a cook sees: the dish in preparation and the queue behind it"""

    current: Optional[KitchenItemResponse] = None
    queue: List[KitchenItemResponse] = Field(default_factory=list)


class RejectResponse(BaseModel):
    item_id: int
    reassigned: bool
    cook_id: Optional[int] = None


class RosterEntryResponse(BaseModel):
    cook_id: int
    is_active: bool
    last_seen_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AssignmentPair(BaseModel):
    item_id: int
    cook_id: int


class RebalanceResponse(BaseModel):
    eligible_cook_ids: List[int]
    assignments: List[AssignmentPair]
    promoted: List[AssignmentPair]
    pending_left: int
