from fastapi import APIRouter, Depends, Query

from salesdash.config import Settings
from salesdash.core.constants import API_PREFIX
from salesdash.database.store import SaleStore
from salesdash.dependencies import get_app_settings, get_store
from salesdash.schemas.sale import TransactionPage
from salesdash.services.analytics_service import list_transactions

router = APIRouter(prefix=API_PREFIX, tags=["Transactions"])


@router.get("/transactions", response_model=TransactionPage)
def transactions(
    month: str | None = Query(None, description="Calendar month 1-12"),
    search: str = Query("", description="Title/description text or exact price"),
    page: str | None = Query(None, description="1-based page number"),
    per_page: str | None = Query(None, alias="perPage", description="Records per page"),
    store: SaleStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return list_transactions(
        store,
        month,
        search=search,
        page=page,
        per_page=per_page or settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )


__all__ = ["router"]
