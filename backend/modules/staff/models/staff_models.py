from sqlalchemy import Column, Integer, String, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin


class StaffMember(Base, TimestampMixin):
    __tablename__ = "staff_members"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True)
    role_id = Column(Integer, ForeignKey("roles.id"), index=True)
    # Disabled accounts never receive kitchen work
    is_active = Column(Boolean, default=True, nullable=False)

    role = relationship("Role", back_populates="staff_members")


class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(String)

    staff_members = relationship("StaffMember", back_populates="role")
