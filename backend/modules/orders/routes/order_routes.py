from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from core.database import get_db
from ..services.order_service import OrderService
from ..schemas.order_schemas import (
    OrderCreate, OrderOut, OrderChanges, OrderItemsAppend,
    OrderMutationResponse
)

router = APIRouter(prefix="/api/v1/orders", tags=["Orders"])


@router.get("/", response_model=List[OrderOut])
async def get_open_orders(db: Session = Depends(get_db)):
    """Orders that have not been finished, newest first."""
    return OrderService(db).list_open_orders()


@router.get("/pending", response_model=List[OrderOut])
async def get_waiting_orders(db: Session = Depends(get_db)):
    """Waiting orders with only the items nobody has picked up yet."""
    return OrderService(db).list_waiting_orders()


@router.post("/", response_model=OrderMutationResponse,
             status_code=status.HTTP_201_CREATED)
async def create_order(order_data: OrderCreate, db: Session = Depends(get_db)):
    """
    Register an order. Dishes are handed to cooks as part of the request.

    - **table_no**: table the order belongs to
    - **waiter_id**: staff member taking the order
    - **items**: at least one item; `kind` defaults to `dish`
    """
    order = OrderService(db).create_order(order_data)
    return {"message": "Order registered", "order": order}


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_order(order_id)


@router.post("/{order_id}/apply", response_model=OrderMutationResponse)
async def apply_order_changes(
    order_id: int,
    changes: OrderChanges,
    db: Session = Depends(get_db)
):
    """
    Edit an open order in one go.

    Notes can be edited and items deleted only while a dish is still
    waiting for a cook, or while a drink has not been served. Other ids
    are ignored.
    """
    order = OrderService(db).apply_changes(order_id, changes)
    return {"message": "Changes applied", "order": order}


@router.post("/{order_id}/items", response_model=OrderMutationResponse)
async def append_order_items(
    order_id: int,
    payload: OrderItemsAppend,
    db: Session = Depends(get_db)
):
    order = OrderService(db).append_items(order_id, payload.items)
    return {"message": "Items appended", "order": order}


@router.delete("/{order_id}", response_model=dict)
async def delete_order(order_id: int, db: Session = Depends(get_db)):
    OrderService(db).delete_order(order_id)
    return {"message": "Order deleted"}


@router.patch("/{order_id}/finish", response_model=OrderOut)
async def finish_order(order_id: int, db: Session = Depends(get_db)):
    """Close the order. Every dish must be ready."""
    return OrderService(db).finish_order(order_id)
