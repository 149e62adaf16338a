from dataclasses import dataclass, replace
from typing import Optional

from sqlalchemy import Select, and_, case, extract, false, func, or_, select, true

from salesdash.core.params import parse_price_search
from salesdash.models.sale import SaleRecord

_SALES = SaleRecord.__table__


@dataclass(frozen=True)
class SaleQuery:
    """Composable filter over the sales table.

    Stages are always applied in the same order: month filter, extra
    filters (search, price range) in the order they were added, then
    pagination. Each builder method returns a new query.
    """

    conditions: tuple = ()
    offset: Optional[int] = None
    limit: Optional[int] = None

    @classmethod
    def for_month(cls, month: Optional[int]) -> "SaleQuery":
        # None is an unusable month and must match nothing.
        if month is None:
            return cls(conditions=(false(),))
        return cls(conditions=(extract("month", SaleRecord.date_of_sale) == month,))

    def where(self, *clauses) -> "SaleQuery":
        return replace(self, conditions=self.conditions + tuple(clauses))

    def search(self, text: Optional[str]) -> "SaleQuery":
        if not text:
            return self
        clauses = [
            SaleRecord.title.icontains(text, autoescape=True),
            SaleRecord.description.icontains(text, autoescape=True),
        ]
        price = parse_price_search(text)
        if price is not None:
            clauses.append(SaleRecord.price == price)
        return self.where(or_(*clauses))

    def price_between(self, lower: float, upper: Optional[float] = None) -> "SaleQuery":
        if upper is None:
            return self.where(SaleRecord.price >= lower)
        return self.where(and_(SaleRecord.price >= lower, SaleRecord.price < upper))

    def paginate(self, page: int, per_page: int) -> "SaleQuery":
        return replace(self, offset=(page - 1) * per_page, limit=per_page)

    def rows(self) -> Select:
        stmt = select(_SALES).where(*self.conditions).order_by(SaleRecord.id)
        if self.offset is not None:
            stmt = stmt.offset(self.offset)
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt

    def count(self) -> Select:
        return select(func.count()).select_from(_SALES).where(*self.conditions)

    def totals(self) -> Select:
        return select(
            func.coalesce(func.sum(SaleRecord.price), 0).label("total_amount"),
            func.coalesce(
                func.sum(case((SaleRecord.sold == true(), 1), else_=0)), 0
            ).label("sold_items"),
            func.coalesce(
                func.sum(case((SaleRecord.sold == false(), 1), else_=0)), 0
            ).label("not_sold_items"),
        ).where(*self.conditions)

    def by_category(self) -> Select:
        return (
            select(SaleRecord.category, func.count().label("count"))
            .where(*self.conditions)
            .group_by(SaleRecord.category)
            .order_by(SaleRecord.category)
        )


__all__ = ["SaleQuery"]
