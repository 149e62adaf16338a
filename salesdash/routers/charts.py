from typing import List

from fastapi import APIRouter, Depends, Query

from salesdash.core.constants import API_PREFIX
from salesdash.database.store import SaleStore
from salesdash.dependencies import get_store
from salesdash.schemas.sale import CategoryCount, CombinedReport, PriceBucketCount, Statistics
from salesdash.services.analytics_service import (
    combined_report,
    get_category_breakdown,
    get_price_histogram,
    get_statistics,
)

router = APIRouter(prefix=API_PREFIX, tags=["Charts"])


@router.get("/statistics", response_model=Statistics)
def statistics(
    month: str | None = Query(None, description="Calendar month 1-12"),
    store: SaleStore = Depends(get_store),
):
    return get_statistics(store, month)


@router.get("/bar-chart", response_model=List[PriceBucketCount])
def bar_chart(
    month: str | None = Query(None, description="Calendar month 1-12"),
    store: SaleStore = Depends(get_store),
):
    return get_price_histogram(store, month)


@router.get("/pie-chart", response_model=List[CategoryCount])
def pie_chart(
    month: str | None = Query(None, description="Calendar month 1-12"),
    store: SaleStore = Depends(get_store),
):
    return get_category_breakdown(store, month)


@router.get("/combined-data", response_model=CombinedReport)
def combined_data(
    month: str | None = Query(None, description="Calendar month 1-12"),
    store: SaleStore = Depends(get_store),
):
    return combined_report(store, month)


__all__ = ["router"]
