from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String, Text

from salesdash.database.base import Base


class SaleRecord(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    source_id = Column(Integer)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    category = Column(String, nullable=False)
    sold = Column(Boolean, nullable=False, default=False)
    image = Column(String)

    # naive UTC
    date_of_sale = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_sales_date_of_sale", "date_of_sale"),
        Index("idx_sales_category", "category"),
    )


__all__ = ["SaleRecord"]
