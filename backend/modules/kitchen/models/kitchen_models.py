# backend/modules/kitchen/models/kitchen_models.py

"""
Kitchen roster: which cooks are on shift and eligible for dish assignment.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin


class KitchenCook(Base, TimestampMixin):
    """On-shift flag for a cook"""
    __tablename__ = "kitchen_cooks"

    id = Column(Integer, primary_key=True, index=True)
    cook_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, unique=True)
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    last_seen_at = Column(DateTime, nullable=True)

    cook = relationship("StaffMember")
