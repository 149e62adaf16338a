from fastapi import APIRouter, Depends

from salesdash.config import Settings
from salesdash.core.constants import API_PREFIX
from salesdash.database.store import SaleStore
from salesdash.dependencies import get_app_settings, get_store
from salesdash.schemas.sale import InitializeResult
from salesdash.services.seed_service import initialize_store

router = APIRouter(prefix=API_PREFIX, tags=["Admin"])


@router.post("/initialize-database", response_model=InitializeResult)
def initialize_database(
    store: SaleStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return initialize_store(
        store,
        url=settings.SEED_URL,
        timeout=settings.SEED_TIMEOUT_SECONDS,
    )


__all__ = ["router"]
