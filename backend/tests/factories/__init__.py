# backend/tests/factories/__init__.py

"""
Shared test factories for the Comandera backend.
"""

from .base import BaseFactory
from .staff import RoleFactory, StaffMemberFactory, KitchenCookFactory
from .order import OrderFactory, OrderItemFactory

__all__ = [
    # Base
    'BaseFactory',

    # Staff and roster
    'RoleFactory',
    'StaffMemberFactory',
    'KitchenCookFactory',

    # Order
    'OrderFactory',
    'OrderItemFactory',
]
