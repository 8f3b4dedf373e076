"""
Waiter-side order management.

Every change to the set of pending dishes ends with a kitchen rebalance so
new dishes reach a cook right away.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from core.exceptions import ConflictError, NotFoundError, ValidationError
from modules.kitchen.services.assignment_service import KitchenAssignmentService
from modules.staff.models import StaffMember
from ..enums.order_enums import OrderItemKind, OrderItemState, OrderStatus
from ..models.order_models import Order, OrderItem
from ..schemas.order_schemas import OrderChanges, OrderCreate, OrderItemCreate, OrderOut

logger = logging.getLogger(__name__)


def is_editable(item: OrderItem) -> bool:
    """Dishes can change only before a cook has them; drinks until they are served."""
    if item.kind == OrderItemKind.DISH:
        return item.state == OrderItemState.PENDING and item.cook_id is None
    return item.state != OrderItemState.READY


class OrderService:
    """Service for creating and editing orders"""

    def __init__(self, db: Session, assigner: Optional[KitchenAssignmentService] = None):
        self.db = db
        self.assigner = assigner or KitchenAssignmentService(db)

    def _build_items(self, items: List[OrderItemCreate]) -> List[OrderItem]:
        return [
            OrderItem(
                name=it.name,
                price=it.price,
                notes=it.notes,
                kind=it.kind,
                state=OrderItemState.PENDING,
            )
            for it in items
        ]

    def get_order(self, order_id: int) -> Order:
        order = (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.id == order_id)
            .first()
        )
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def list_open_orders(self) -> List[Order]:
        """Orders not finished yet, newest first"""
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.finished_at.is_(None))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def list_waiting_orders(self) -> List[OrderOut]:
        """Waiting orders with only their still-pending items"""
        orders = (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.finished_at.is_(None), Order.status == OrderStatus.WAITING)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        result = []
        for order in orders:
            out = OrderOut.model_validate(order)
            out.items = [it for it in out.items if it.state == OrderItemState.PENDING]
            result.append(out)
        return result

    def create_order(self, order_data: OrderCreate) -> Order:
        waiter = self.db.query(StaffMember).filter(StaffMember.id == order_data.waiter_id).first()
        if not waiter:
            raise NotFoundError(f"Waiter {order_data.waiter_id} not found")

        try:
            order = Order(
                table_no=order_data.table_no,
                waiter_id=order_data.waiter_id,
                status=OrderStatus.WAITING,
                items=self._build_items(order_data.items),
            )
            self.db.add(order)
            self.db.flush()
            order.code = f"ORD-{order.id:05d}"
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create order: {str(e)}")
            raise

        logger.info(f"Created order {order.id} for table {order.table_no} with {len(order_data.items)} items")
        self.assigner.rebalance()
        return self.get_order(order.id)

    def append_items(self, order_id: int, items: List[OrderItemCreate]) -> Order:
        order = self.get_order(order_id)
        if order.finished_at is not None:
            raise ValidationError(f"Order {order_id} is already finished")

        try:
            order.items.extend(self._build_items(items))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to append items to order {order_id}: {str(e)}")
            raise

        logger.info(f"Appended {len(items)} items to order {order_id}")
        self.assigner.rebalance()
        return self.get_order(order_id)

    def apply_changes(self, order_id: int, changes: OrderChanges) -> Order:
        """
        Apply note edits, deletions and additions in one transaction.

        Items that are no longer editable are skipped silently.
        """
        order = self.get_order(order_id)
        if order.finished_at is not None:
            raise ValidationError(f"Order {order_id} is already finished")

        items_by_id = {it.id: it for it in order.items}
        try:
            for upd in changes.update:
                item = items_by_id.get(upd.id)
                if item is None or not is_editable(item):
                    continue
                item.notes = upd.notes or None

            for item_id in set(changes.delete_ids):
                item = items_by_id.get(item_id)
                if item is None or not is_editable(item):
                    continue
                order.items.remove(item)

            if changes.add:
                order.items.extend(self._build_items(changes.add))

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to apply changes to order {order_id}: {str(e)}")
            raise

        logger.info(f"Applied changes to order {order_id}")
        self.assigner.rebalance()
        return self.get_order(order_id)

    def delete_order(self, order_id: int) -> None:
        order = self.get_order(order_id)
        self.db.delete(order)
        self.db.commit()
        logger.info(f"Deleted order {order_id}")
        # Deleted dishes may have been holding cooks' slots
        self.assigner.rebalance()

    def finish_order(self, order_id: int) -> Order:
        """Close an order once every dish is ready"""
        order = self.get_order(order_id)
        if order.finished_at is not None:
            raise ValidationError(f"Order {order_id} is already finished")

        dishes = [it for it in order.items if it.kind == OrderItemKind.DISH]
        if not dishes or any(it.state != OrderItemState.READY for it in dishes):
            raise ConflictError(f"Order {order_id} still has dishes in progress")

        now = datetime.utcnow()
        order.finished_at = now
        order.duration_sec = max(0, int((now - order.created_at).total_seconds()))
        order.status = OrderStatus.COMPLETED
        self.db.commit()
        logger.info(f"Finished order {order_id} after {order.duration_sec}s")
        return self.get_order(order_id)
