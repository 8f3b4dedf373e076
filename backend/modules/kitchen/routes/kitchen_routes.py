# backend/modules/kitchen/routes/kitchen_routes.py

"""
API routes for the kitchen line.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from core.database import get_db
from ..services.kitchen_service import KitchenService
from ..schemas.kitchen_schemas import (
    CookRequest,
    CookItemsResponse,
    KitchenItemResponse,
    RejectResponse,
    RosterEntryResponse,
    RebalanceResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/kitchen", tags=["Kitchen"])


# ========== Roster ==========

@router.post("/activate", response_model=RosterEntryResponse)
async def activate_cook(request: CookRequest, db: Session = Depends(get_db)):
    """Put a cook on shift; pending dishes are redistributed immediately"""
    return KitchenService(db).activate_cook(request.cook_id)


@router.post("/deactivate", response_model=RosterEntryResponse)
async def deactivate_cook(request: CookRequest, db: Session = Depends(get_db)):
    """Take a cook off shift"""
    return KitchenService(db).deactivate_cook(request.cook_id)


@router.post("/heartbeat", response_model=RosterEntryResponse)
async def heartbeat(request: CookRequest, db: Session = Depends(get_db)):
    return KitchenService(db).heartbeat(request.cook_id)


# ========== Cook views ==========

@router.get("/mine", response_model=CookItemsResponse)
async def get_my_items(
    cook_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    """Dish in preparation and the queue assigned to a cook"""
    return KitchenService(db).get_cook_items(cook_id)


@router.get("/history", response_model=List[KitchenItemResponse])
async def get_history(
    cook_id: int = Query(..., gt=0),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return KitchenService(db).get_history(cook_id, limit)


# ========== Item actions ==========

@router.post("/items/{item_id}/accept", response_model=KitchenItemResponse)
async def accept_item(item_id: int, request: CookRequest, db: Session = Depends(get_db)):
    return KitchenService(db).accept_item(item_id, request.cook_id)


@router.post("/items/{item_id}/reject", response_model=RejectResponse)
async def reject_item(item_id: int, request: CookRequest, db: Session = Depends(get_db)):
    """
    Reject a dish. It goes to the least loaded other cook with room, or
    stays pending when nobody has room.
    """
    return KitchenService(db).reject_item(item_id, request.cook_id)


@router.patch("/items/{item_id}/ready", response_model=KitchenItemResponse)
async def mark_item_ready(item_id: int, request: CookRequest, db: Session = Depends(get_db)):
    return KitchenService(db).mark_ready(item_id, request.cook_id)


@router.post("/rebalance", response_model=RebalanceResponse)
async def rebalance(db: Session = Depends(get_db)):
    """Redistribute pending dishes on demand"""
    result = KitchenService(db).rebalance()
    return result.to_dict()
