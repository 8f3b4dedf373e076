from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        Numeric, Text, Enum, Index)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin
from ..enums.order_enums import OrderStatus, OrderItemKind, OrderItemState


def _enum_values(enum_cls):
    return [e.value for e in enum_cls]


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(16), nullable=True, index=True)
    table_no = Column(Integer, nullable=False, index=True)
    waiter_id = Column(Integer, ForeignKey("staff_members.id"),
                       nullable=False, index=True)
    status = Column(
        Enum(OrderStatus, values_callable=_enum_values, name="order_status"),
        nullable=False,
        default=OrderStatus.WAITING,
        index=True,
    )
    finished_at = Column(DateTime, nullable=True)
    duration_sec = Column(Integer, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )
    waiter = relationship("StaffMember", foreign_keys=[waiter_id])


class OrderItem(Base, TimestampMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"),
                      nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)
    kind = Column(
        Enum(OrderItemKind, values_callable=_enum_values, name="order_item_kind"),
        nullable=False,
        default=OrderItemKind.DISH,
    )
    state = Column(
        Enum(OrderItemState, values_callable=_enum_values, name="order_item_state"),
        nullable=False,
        default=OrderItemState.PENDING,
    )
    cook_id = Column(Integer, ForeignKey("staff_members.id"), nullable=True)
    assigned_at = Column(DateTime, nullable=True)
    finished_at = Column(DateTime, nullable=True)

    order = relationship("Order", back_populates="items")
    cook = relationship("StaffMember", foreign_keys=[cook_id])

    __table_args__ = (
        Index("idx_order_item_pool", "state", "cook_id", "kind", "created_at"),
        Index("idx_order_item_cook_state", "cook_id", "state"),
    )

