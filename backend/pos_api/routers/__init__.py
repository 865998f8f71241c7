"""
API routers.

- orders: /api/orders
- kitchen: /api/kitchen
- ktv: /api/ktv
- hotel: /api/hotel
- menu: /api/menu
- finance: /api/finance
- health: /api/health
"""

from .orders import router as orders_router
from .kitchen import router as kitchen_router
from .ktv import router as ktv_router
from .hotel import router as hotel_router
from .menu import router as menu_router
from .finance import router as finance_router
from .health import router as health_router

__all__ = [
    "orders_router",
    "kitchen_router",
    "ktv_router",
    "hotel_router",
    "menu_router",
    "finance_router",
    "health_router",
]
