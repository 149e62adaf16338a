from salesdash.routers.admin import router as admin_router
from salesdash.routers.charts import router as charts_router
from salesdash.routers.health import router as health_router
from salesdash.routers.transactions import router as transactions_router

__all__ = [
    "admin_router",
    "charts_router",
    "health_router",
    "transactions_router",
]
