from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from salesdash.config import Settings
from salesdash.database.store import SaleStore
from salesdash.dependencies import get_app_settings, get_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(
    store: SaleStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "time": datetime.now(timezone.utc).isoformat(),
        "records": store.record_count(),
    }
