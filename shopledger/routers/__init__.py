from shopledger.routers.expenses import router as expenses_router
from shopledger.routers.health import router as health_router
from shopledger.routers.inventory import router as inventory_router
from shopledger.routers.meta import router as meta_router
from shopledger.routers.summary import router as summary_router

__all__ = [
    "expenses_router",
    "health_router",
    "inventory_router",
    "meta_router",
    "summary_router",
]
