import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from salesdash.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_ROW_OFFSET,
    PRICE_BUCKETS,
    bucket_label,
)
from salesdash.core.errors import QueryError
from salesdash.core.params import (
    parse_month_loose,
    parse_month_strict,
    parse_positive_int,
)
from salesdash.database.store import SaleStore
from salesdash.schemas.sale import (
    CategoryCount,
    CombinedReport,
    PriceBucketCount,
    SaleRecordRead,
    Statistics,
    TransactionPage,
)
from salesdash.services.query_builder import SaleQuery

logger = logging.getLogger(__name__)

def run_concurrently(calls: Sequence[Callable[[], Any]], *, max_workers: int) -> List[Any]:
    """Run every call on a thread pool and return results in call order.

    All calls finish before anything is returned. If one or more raised,
    the first failure in call order is re-raised and no results are kept.
    """
    if not calls:
        return []
    workers = max(1, min(int(max_workers), len(calls)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sales-query") as pool:
        futures = [pool.submit(call) for call in calls]
    return [future.result() for future in futures]


def _execute(store: SaleStore, handler: Callable):
    try:
        with store.connect() as conn:
            return handler(conn)
    except SQLAlchemyError as exc:
        raise QueryError(str(exc)) from exc


def _fetch_rows(store: SaleStore, query: SaleQuery) -> List[SaleRecordRead]:
    rows = _execute(store, lambda conn: conn.execute(query.rows()).mappings().all())
    return [SaleRecordRead.model_validate(dict(row)) for row in rows]


def _fetch_count(store: SaleStore, query: SaleQuery) -> int:
    return int(_execute(store, lambda conn: conn.execute(query.count()).scalar_one()))


def list_transactions(
    store: SaleStore,
    month: Any,
    search: Optional[str] = "",
    page: Any = DEFAULT_PAGE,
    per_page: Any = DEFAULT_PAGE_SIZE,
    *,
    max_page_size: Optional[int] = None,
) -> TransactionPage:
    """One page of month-matching records, optionally narrowed by search text.

    ``total`` counts every record of the month and ignores ``search``; only
    the returned page is narrowed. Clients page through the month, not
    through the search results.
    """
    month_value = parse_month_loose(month)
    per_page_value = parse_positive_int(
        per_page,
        "perPage",
        default=DEFAULT_PAGE_SIZE,
        maximum=max_page_size,
    )
    page_value = parse_positive_int(
        page,
        "page",
        default=DEFAULT_PAGE,
        maximum=MAX_ROW_OFFSET // per_page_value + 1,
    )
    search_text = search or ""

    base = SaleQuery.for_month(month_value)
    page_query = base.search(search_text).paginate(page_value, per_page_value)

    rows, total = run_concurrently(
        [
            lambda: _fetch_rows(store, page_query),
            lambda: _fetch_count(store, base),
        ],
        max_workers=store.query_workers,
    )

    return TransactionPage(
        transactions=rows,
        total=total,
        page=page_value,
        per_page=per_page_value,
        total_pages=math.ceil(total / per_page_value),
    )


def _statistics_for(store: SaleStore, month_value: Optional[int]) -> Statistics:
    row = _execute(
        store,
        lambda conn: conn.execute(SaleQuery.for_month(month_value).totals()).mappings().one(),
    )
    return Statistics(
        total_amount=round(float(row["total_amount"] or 0), 2),
        sold_items=int(row["sold_items"] or 0),
        not_sold_items=int(row["not_sold_items"] or 0),
    )


def _histogram_for(store: SaleStore, month_value: Optional[int]) -> List[PriceBucketCount]:
    base = SaleQuery.for_month(month_value)
    calls = []
    for lower, upper in PRICE_BUCKETS:
        bucket_query = base.price_between(lower, upper)
        calls.append(lambda query=bucket_query: _fetch_count(store, query))

    counts = run_concurrently(calls, max_workers=store.query_workers)
    return [
        PriceBucketCount(range=bucket_label(lower, upper), count=count)
        for (lower, upper), count in zip(PRICE_BUCKETS, counts)
    ]


def _categories_for(store: SaleStore, month_value: Optional[int]) -> List[CategoryCount]:
    rows = _execute(
        store,
        lambda conn: conn.execute(SaleQuery.for_month(month_value).by_category()).mappings().all(),
    )
    return [CategoryCount(category=row["category"], count=int(row["count"])) for row in rows]


def get_statistics(store: SaleStore, month: Any) -> Statistics:
    return _statistics_for(store, parse_month_loose(month))


def get_price_histogram(store: SaleStore, month: Any) -> List[PriceBucketCount]:
    return _histogram_for(store, parse_month_loose(month))


def get_category_breakdown(store: SaleStore, month: Any) -> List[CategoryCount]:
    return _categories_for(store, parse_month_loose(month))


def combined_report(store: SaleStore, month: Any) -> CombinedReport:
    month_value = parse_month_strict(month)
    logger.debug("Building combined report for month %s", month_value)

    statistics, bar_chart, pie_chart = run_concurrently(
        [
            lambda: _statistics_for(store, month_value),
            lambda: _histogram_for(store, month_value),
            lambda: _categories_for(store, month_value),
        ],
        max_workers=store.query_workers,
    )
    return CombinedReport(statistics=statistics, bar_chart=bar_chart, pie_chart=pie_chart)


__all__ = [
    "combined_report",
    "get_category_breakdown",
    "get_price_histogram",
    "get_statistics",
    "list_transactions",
    "run_concurrently",
]
