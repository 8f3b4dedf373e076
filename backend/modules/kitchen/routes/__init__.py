# backend/modules/kitchen/routes/__init__.py

from .kitchen_routes import router

__all__ = ["router"]
