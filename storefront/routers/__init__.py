from storefront.routers.catalog import router as catalog_router
from storefront.routers.checkout import router as checkout_router
from storefront.routers.delivery import router as delivery_router
from storefront.routers.godowns import router as godowns_router
from storefront.routers.health import router as health_router
from storefront.routers.orders import router as orders_router
from storefront.routers.stock import router as stock_router

__all__ = [
    "catalog_router",
    "checkout_router",
    "delivery_router",
    "godowns_router",
    "health_router",
    "orders_router",
    "stock_router",
]
