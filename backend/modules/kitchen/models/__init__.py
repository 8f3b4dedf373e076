# backend/modules/kitchen/models/__init__.py

from .kitchen_models import KitchenCook

__all__ = ["KitchenCook"]
