"""
API Routers

Each module groups the endpoints of one resource; ``main`` mounts them.
"""

from uaifood.routers.addresses import router as addresses_router
from uaifood.routers.catalog import categories_router, items_router
from uaifood.routers.orders import router as orders_router
from uaifood.routers.users import router as users_router

all_routers = [
    users_router,
    addresses_router,
    categories_router,
    items_router,
    orders_router,
]

__all__ = ["all_routers"]
