from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SaleRecordIn(BaseModel):
    """One element of the seed feed, checked once before it reaches the store."""

    source_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("id", "source_id"),
    )
    title: str
    description: str = ""
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    sold: bool
    image: Optional[str] = None
    date_of_sale: datetime = Field(
        validation_alias=AliasChoices("dateOfSale", "date_of_sale"),
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value):
        if value is None:
            return ""
        return value

    @field_validator("date_of_sale")
    @classmethod
    def _to_naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def to_row(self) -> dict:
        return self.model_dump()


class SaleRecordRead(BaseModel):
    id: int
    title: str
    description: str
    price: float
    category: str
    sold: bool
    image: Optional[str] = None
    date_of_sale: datetime = Field(alias="dateOfSale")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TransactionPage(BaseModel):
    transactions: List[SaleRecordRead] = Field(default_factory=list)
    total: int
    page: int
    per_page: int = Field(alias="perPage")
    total_pages: int = Field(alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


class Statistics(BaseModel):
    total_amount: float = Field(0.0, alias="totalAmount")
    sold_items: int = Field(0, alias="soldItems")
    not_sold_items: int = Field(0, alias="notSoldItems")

    model_config = ConfigDict(populate_by_name=True)


class PriceBucketCount(BaseModel):
    range: str
    count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class CombinedReport(BaseModel):
    statistics: Statistics
    bar_chart: List[PriceBucketCount] = Field(alias="barChart")
    pie_chart: List[CategoryCount] = Field(alias="pieChart")

    model_config = ConfigDict(populate_by_name=True)


class InitializeResult(BaseModel):
    message: str
    inserted: int


__all__ = [
    "CategoryCount",
    "CombinedReport",
    "InitializeResult",
    "PriceBucketCount",
    "SaleRecordIn",
    "SaleRecordRead",
    "Statistics",
    "TransactionPage",
]
