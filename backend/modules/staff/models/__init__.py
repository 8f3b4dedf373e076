from .staff_models import StaffMember, Role

__all__ = [
    "StaffMember",
    "Role",
]
