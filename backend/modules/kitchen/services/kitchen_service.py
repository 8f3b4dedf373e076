# backend/modules/kitchen/services/kitchen_service.py

"""
Cook-facing kitchen operations: shift roster, the cook's own queue, and the
accept / reject / ready actions on assigned dishes.
"""

from datetime import datetime
from typing import Dict, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased, joinedload

from core.exceptions import ConflictError, NotFoundError, PermissionError, ValidationError
from modules.orders.enums.order_enums import OrderItemKind, OrderItemState
from modules.orders.models.order_models import OrderItem
from modules.staff.models import Role, StaffMember
from ..models.kitchen_models import KitchenCook
from .assignment_service import KitchenAssignmentService, RebalanceResult

logger = logging.getLogger(__name__)


class KitchenService:
    """Service for cook actions on the kitchen line"""

    def __init__(self, db: Session, assigner: Optional[KitchenAssignmentService] = None):
        self.db = db
        self.assigner = assigner or KitchenAssignmentService(db)

    # Roster
    def _get_roster_entry(self, cook_id: int) -> Optional[KitchenCook]:
        return self.db.query(KitchenCook).filter(KitchenCook.cook_id == cook_id).first()

    def activate_cook(self, cook_id: int) -> KitchenCook:
        """Put a cook on shift and hand them work"""
        cook = self.db.query(StaffMember).filter(StaffMember.id == cook_id).first()
        if not cook or not cook.is_active:
            raise NotFoundError(f"Cook {cook_id} not found")

        is_cook = (
            self.db.query(Role.id)
            .filter(
                Role.id == cook.role_id,
                func.lower(Role.name) == self.assigner.cook_role_name.lower(),
            )
            .first()
        )
        if not is_cook:
            raise ValidationError(f"Staff member {cook_id} is not kitchen staff")

        entry = self._get_roster_entry(cook_id)
        if entry is None:
            entry = KitchenCook(cook_id=cook_id)
            self.db.add(entry)
        entry.is_active = True
        entry.last_seen_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Cook {cook_id} is on shift")

        self.assigner.rebalance()
        self.db.refresh(entry)
        return entry

    def deactivate_cook(self, cook_id: int) -> KitchenCook:
        """Take a cook off shift. Dishes they already hold stay with them."""
        entry = self._get_roster_entry(cook_id)
        if entry is None:
            raise NotFoundError(f"Cook {cook_id} is not on the roster")

        entry.is_active = False
        self.db.commit()
        logger.info(f"Cook {cook_id} is off shift")

        self.assigner.rebalance()
        self.db.refresh(entry)
        return entry

    def heartbeat(self, cook_id: int) -> KitchenCook:
        entry = self._get_roster_entry(cook_id)
        if entry is None:
            raise NotFoundError(f"Cook {cook_id} is not on the roster")
        entry.last_seen_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(entry)
        return entry

    # Views
    def get_cook_items(self, cook_id: int) -> Dict:
        """The dish in preparation plus the queued dishes, oldest assignment first"""
        items = (
            self.db.query(OrderItem)
            .options(joinedload(OrderItem.order))
            .filter(
                OrderItem.cook_id == cook_id,
                OrderItem.kind == OrderItemKind.DISH,
                OrderItem.state.in_([OrderItemState.ASSIGNED, OrderItemState.PREPARING]),
            )
            .order_by(OrderItem.assigned_at.asc().nullslast(), OrderItem.id.asc())
            .all()
        )
        current = next((it for it in items if it.state == OrderItemState.PREPARING), None)
        queue = [it for it in items if it.state == OrderItemState.ASSIGNED]
        return {"current": current, "queue": queue}

    def get_history(self, cook_id: int, limit: int = 50) -> List[OrderItem]:
        return (
            self.db.query(OrderItem)
            .options(joinedload(OrderItem.order))
            .filter(
                OrderItem.cook_id == cook_id,
                OrderItem.kind == OrderItemKind.DISH,
                OrderItem.state == OrderItemState.READY,
            )
            .order_by(OrderItem.finished_at.desc(), OrderItem.id.desc())
            .limit(limit)
            .all()
        )

    # Item actions
    def _get_held_dish(self, item_id: int, cook_id: int) -> OrderItem:
        item = self.db.query(OrderItem).filter(OrderItem.id == item_id).first()
        if not item or item.kind != OrderItemKind.DISH:
            raise NotFoundError(f"Dish {item_id} not found")
        if item.cook_id != cook_id:
            raise PermissionError(f"Dish {item_id} is not assigned to cook {cook_id}")
        return item

    def accept_item(self, item_id: int, cook_id: int) -> OrderItem:
        """Start a specific queued dish, as long as the cook is not already cooking one"""
        item = self._get_held_dish(item_id, cook_id)
        if item.state == OrderItemState.PREPARING:
            return item
        if item.state != OrderItemState.ASSIGNED:
            raise ValidationError(f"Dish {item_id} cannot be accepted in state {item.state.value}")

        busy = aliased(OrderItem)
        slot_taken = (
            select(busy.id)
            .where(
                busy.cook_id == cook_id,
                busy.state == OrderItemState.PREPARING,
            )
            .exists()
        )
        try:
            updated = (
                self.db.query(OrderItem)
                .filter(
                    OrderItem.id == item_id,
                    OrderItem.cook_id == cook_id,
                    OrderItem.state == OrderItemState.ASSIGNED,
                    ~slot_taken,
                )
                .update(
                    {
                        OrderItem.state: OrderItemState.PREPARING,
                        OrderItem.assigned_at: item.assigned_at or datetime.utcnow(),
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to accept dish {item_id} for cook {cook_id}: {str(e)}")
            raise

        if updated != 1:
            raise ConflictError(f"Cook {cook_id} is already preparing another dish")

        self.db.refresh(item)
        logger.info(f"Cook {cook_id} accepted dish {item_id}")
        return item

    def reject_item(self, item_id: int, cook_id: int) -> Dict:
        """Return a dish to the pool and try to hand it to someone else"""
        item = self._get_held_dish(item_id, cook_id)
        if item.state == OrderItemState.READY:
            raise ValidationError(f"Dish {item_id} is already ready")

        item.state = OrderItemState.PENDING
        item.cook_id = None
        item.assigned_at = None
        self.db.commit()
        logger.info(f"Cook {cook_id} rejected dish {item_id}")

        reassigned = self.assigner.reassign(item_id, cook_id)
        # The rejected dish may have held the cook's active slot
        self.assigner.promote_next(cook_id)

        self.db.refresh(item)
        return {"item_id": item_id, "reassigned": reassigned, "cook_id": item.cook_id}

    def mark_ready(self, item_id: int, cook_id: int) -> OrderItem:
        """Finish a dish, start the cook's next one and refill the line"""
        item = self._get_held_dish(item_id, cook_id)
        if item.state not in (OrderItemState.ASSIGNED, OrderItemState.PREPARING):
            raise ValidationError(f"Dish {item_id} cannot be finished in state {item.state.value}")

        item.state = OrderItemState.READY
        item.finished_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Cook {cook_id} finished dish {item_id}")

        self.assigner.promote_next(cook_id)
        self.assigner.rebalance()

        self.db.refresh(item)
        return item

    def rebalance(self) -> RebalanceResult:
        return self.assigner.rebalance()
