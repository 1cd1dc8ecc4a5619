"""
Convenience exports for API endpoint routers.
"""

from .health import router as health_router
from .patients import router as patients_router
from .users import router as users_router

__all__ = [
    "health_router",
    "patients_router",
    "users_router",
]
