from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from ..enums.order_enums import OrderStatus, OrderItemKind, OrderItemState


def _blank_to_none(v):
    if v is not None and not v.strip():
        return None
    return v


class OrderItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0)
    notes: Optional[str] = None
    kind: OrderItemKind = OrderItemKind.DISH

    @field_validator("kind", mode="before")
    @classmethod
    def default_to_dish(cls, v):
        """Anything that is not explicitly a drink goes to the kitchen."""
        if isinstance(v, str) and v.lower() == OrderItemKind.DRINK.value:
            return OrderItemKind.DRINK
        if isinstance(v, OrderItemKind):
            return v
        return OrderItemKind.DISH

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v):
        return _blank_to_none(v)


class OrderCreate(BaseModel):
    table_no: int = Field(..., gt=0)
    waiter_id: int = Field(..., gt=0)
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderItemsAppend(BaseModel):
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderItemNoteUpdate(BaseModel):
    id: int
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v):
        return _blank_to_none(v)


class OrderChanges(BaseModel):
    """Batch of edits applied to an open order in one transaction"""
    add: List[OrderItemCreate] = Field(default_factory=list)
    delete_ids: List[int] = Field(default_factory=list)
    update: List[OrderItemNoteUpdate] = Field(default_factory=list)


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    name: str
    price: Decimal
    notes: Optional[str] = None
    kind: OrderItemKind
    state: OrderItemState
    cook_id: Optional[int] = None
    assigned_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    code: Optional[str] = None
    table_no: int
    waiter_id: int
    status: OrderStatus
    finished_at: Optional[datetime] = None
    duration_sec: Optional[int] = None
    created_at: datetime
    items: List[OrderItemOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class OrderMutationResponse(BaseModel):
    message: str
    order: OrderOut
