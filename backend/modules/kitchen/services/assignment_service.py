# backend/modules/kitchen/services/assignment_service.py

"""
Kitchen work-assignment engine.

Dishes waiting in the pool are pushed to on-shift cooks, least loaded
first, up to a fixed number of open dishes per cook. Each cook works on one
dish at a time: the oldest queued dish is started automatically whenever
the cook's active slot is free.

Every write is committed on its own. A pass that fails half way leaves the
dishes it already handed out assigned; running ``rebalance`` again picks up
the rest without touching what is already assigned.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from core.config import get_settings
from modules.orders.enums.order_enums import (
    OPEN_ITEM_STATES,
    OrderItemKind,
    OrderItemState,
)
from modules.orders.models.order_models import OrderItem
from modules.staff.models import Role, StaffMember
from ..models.kitchen_models import KitchenCook

logger = logging.getLogger(__name__)


@dataclass
class RebalanceResult:
    """Outcome of one rebalance pass"""

    eligible_cook_ids: List[int] = field(default_factory=list)
    assignments: List[Tuple[int, int]] = field(default_factory=list)  # (item_id, cook_id)
    promoted: List[Tuple[int, int]] = field(default_factory=list)  # (item_id, cook_id)
    pending_left: int = 0

    def to_dict(self) -> Dict:
        return {
            "eligible_cook_ids": list(self.eligible_cook_ids),
            "assignments": [
                {"item_id": item_id, "cook_id": cook_id}
                for item_id, cook_id in self.assignments
            ],
            "promoted": [
                {"item_id": item_id, "cook_id": cook_id}
                for item_id, cook_id in self.promoted
            ],
            "pending_left": self.pending_left,
        }


class KitchenAssignmentService:
    """Distributes pending dishes across cooks and keeps one dish in preparation per cook"""

    def __init__(
        self,
        db: Session,
        capacity: Optional[int] = None,
        cook_role_name: Optional[str] = None,
    ):
        settings = get_settings()
        self.db = db
        self.capacity = (
            capacity if capacity is not None else settings.KITCHEN_CAPACITY_PER_COOK
        )
        if self.capacity < 1:
            raise ValueError(f"Cook capacity must be at least 1, got {self.capacity}")
        self.cook_role_name = cook_role_name or settings.KITCHEN_COOK_ROLE_NAME

    # Roster
    def resolve_eligible_cooks(self) -> List[int]:
        """
        Ids of cooks that may receive dishes.

        Active roster entries win; when nobody is on the roster, every enabled
        account holding the cook role is eligible instead.
        """
        roster = (
            self.db.query(KitchenCook.cook_id)
            .filter(KitchenCook.is_active.is_(True))
            .order_by(KitchenCook.id)
            .all()
        )
        cook_ids = [row.cook_id for row in roster]

        if not cook_ids:
            fallback = (
                self.db.query(StaffMember.id)
                .join(Role, StaffMember.role_id == Role.id)
                .filter(
                    func.lower(Role.name) == self.cook_role_name.lower(),
                    StaffMember.is_active.is_(True),
                )
                .order_by(StaffMember.id)
                .all()
            )
            cook_ids = [row.id for row in fallback]
            logger.info(f"No cooks on the roster, falling back to cook accounts: {cook_ids}")

        return list(dict.fromkeys(cook_ids))

    def open_counts(self, cook_ids: List[int]) -> Dict[int, int]:
        """Number of assigned or in-preparation items per cook"""
        counts = {cook_id: 0 for cook_id in cook_ids}
        if not counts:
            return counts

        rows = (
            self.db.query(OrderItem.cook_id, func.count(OrderItem.id))
            .filter(
                OrderItem.cook_id.in_(list(counts)),
                OrderItem.state.in_(OPEN_ITEM_STATES),
            )
            .group_by(OrderItem.cook_id)
            .all()
        )
        for cook_id, open_count in rows:
            counts[cook_id] = open_count
        return counts

    def _by_load(self, cook_ids: List[int]) -> List[Tuple[int, int]]:
        """(cook_id, open_count) pairs, least loaded first; ties keep roster order"""
        counts = self.open_counts(cook_ids)
        return sorted(((cook_id, counts[cook_id]) for cook_id in cook_ids), key=lambda c: c[1])

    # Writes
    def _claim(self, item_id: int, cook_id: int) -> bool:
        """Assign a pooled dish to a cook unless another pass got to it first"""
        try:
            updated = (
                self.db.query(OrderItem)
                .filter(
                    OrderItem.id == item_id,
                    OrderItem.state == OrderItemState.PENDING,
                    OrderItem.cook_id.is_(None),
                    OrderItem.kind == OrderItemKind.DISH,
                )
                .update(
                    {
                        OrderItem.cook_id: cook_id,
                        OrderItem.state: OrderItemState.ASSIGNED,
                        OrderItem.assigned_at: datetime.utcnow(),
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to assign item {item_id} to cook {cook_id}: {str(e)}")
            raise
        return updated == 1

    def promote_next(self, cook_id: int) -> Optional[OrderItem]:
        """
        Start the cook's oldest queued dish if nothing is in preparation.

        Returns the promoted item, or None when the cook is already busy or has
        nothing queued. The original assignment time is kept.
        """
        preparing = (
            self.db.query(func.count(OrderItem.id))
            .filter(
                OrderItem.cook_id == cook_id,
                OrderItem.state == OrderItemState.PREPARING,
            )
            .scalar()
        )
        if preparing:
            return None

        next_item = (
            self.db.query(OrderItem)
            .filter(
                OrderItem.cook_id == cook_id,
                OrderItem.state == OrderItemState.ASSIGNED,
                OrderItem.kind == OrderItemKind.DISH,
            )
            .order_by(OrderItem.assigned_at.asc().nullslast(), OrderItem.id.asc())
            .first()
        )
        if not next_item:
            return None

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
                    OrderItem.id == next_item.id,
                    OrderItem.cook_id == cook_id,
                    OrderItem.state == OrderItemState.ASSIGNED,
                    ~slot_taken,
                )
                .update(
                    {
                        OrderItem.state: OrderItemState.PREPARING,
                        OrderItem.assigned_at: next_item.assigned_at or datetime.utcnow(),
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to promote item {next_item.id} for cook {cook_id}: {str(e)}")
            raise

        if updated != 1:
            return None

        self.db.refresh(next_item)
        logger.info(f"Promoted item {next_item.id} to preparing for cook {cook_id}")
        return next_item

    # Entry points
    def rebalance(self) -> RebalanceResult:
        """Hand out pooled dishes oldest first, least loaded cook first, then fill empty slots"""
        logger.info("Kitchen rebalance started")
        result = RebalanceResult()

        cook_ids = self.resolve_eligible_cooks()
        if not cook_ids:
            logger.info("Kitchen rebalance skipped: no cooks available")
            return result
        result.eligible_cook_ids = cook_ids

        pool = deque(
            row.id
            for row in self.db.query(OrderItem.id)
            .filter(
                OrderItem.state == OrderItemState.PENDING,
                OrderItem.cook_id.is_(None),
                OrderItem.kind == OrderItemKind.DISH,
            )
            .order_by(OrderItem.created_at.asc(), OrderItem.id.asc())
            .all()
        )
        logger.info(f"Pending dishes without cook: {len(pool)}")

        loads = self._by_load(cook_ids)
        for cook_id, open_count in loads:
            if not pool:
                break
            capacity = max(0, self.capacity - open_count)
            logger.info(f"Cook {cook_id} open={open_count} capacity={capacity}")
            while capacity > 0 and pool:
                item_id = pool.popleft()
                if self._claim(item_id, cook_id):
                    capacity -= 1
                    result.assignments.append((item_id, cook_id))
                    logger.info(f"Assigned item {item_id} -> cook {cook_id}")
                else:
                    logger.info(f"Item {item_id} was taken by another pass, skipping")

        for cook_id, _ in loads:
            promoted = self.promote_next(cook_id)
            if promoted is not None:
                result.promoted.append((promoted.id, cook_id))

        result.pending_left = len(pool)
        logger.info(
            f"Kitchen rebalance finished: assigned={len(result.assignments)} "
            f"promoted={len(result.promoted)} pending_left={result.pending_left}"
        )
        return result

    def reassign(self, item_id: int, exclude_cook_id: int) -> bool:
        """
        Give a rejected dish to a different cook.

        The caller must already have returned the dish to the pool. Returns
        False, leaving the dish pooled, when it is no longer pooled or when
        every other cook is at capacity.
        """
        item = self.db.query(OrderItem).filter(OrderItem.id == item_id).first()
        if (
            not item
            or item.state != OrderItemState.PENDING
            or item.cook_id is not None
            or item.kind != OrderItemKind.DISH
        ):
            logger.info(f"Item {item_id} is no longer in the pool, not reassigning")
            return False

        cook_ids = [c for c in self.resolve_eligible_cooks() if c != exclude_cook_id]
        if not cook_ids:
            logger.info(f"No other cook available for item {item_id}")
            return False

        candidate = next(
            (cook_id for cook_id, open_count in self._by_load(cook_ids) if open_count < self.capacity),
            None,
        )
        if candidate is None:
            logger.info(f"All cooks at capacity, item {item_id} stays pending")
            return False

        if not self._claim(item_id, candidate):
            logger.info(f"Item {item_id} was taken by another pass during reassignment")
            return False

        logger.info(f"Reassigned item {item_id} from cook {exclude_cook_id} to cook {candidate}")
        self.promote_next(candidate)
        return True
