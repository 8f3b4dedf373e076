# backend/modules/kitchen/services/__init__.py

"""
Kitchen services.
"""

from .assignment_service import KitchenAssignmentService, RebalanceResult
from .kitchen_service import KitchenService

__all__ = [
    "KitchenAssignmentService",
    "RebalanceResult",
    "KitchenService",
]
