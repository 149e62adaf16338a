import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from salesdash.core.errors import QueryError
from salesdash.database.base import Base
from salesdash.database.engine import create_store_engine
from salesdash.models.sale import SaleRecord

logger = logging.getLogger(__name__)


class SaleStore:
    """Handle on the sale-record database.

    Created by the process entry point and passed to every service call;
    nothing in the package reaches for a module-level engine.
    """

    def __init__(self, engine: Engine, *, query_workers: int = 10):
        self.engine = engine
        self.query_workers = max(1, int(query_workers))

    @classmethod
    def from_url(cls, database_url: str, *, query_workers: int = 10) -> "SaleStore":
        return cls(create_store_engine(database_url), query_workers=query_workers)

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        with self.engine.begin() as conn:
            yield conn

    def record_count(self) -> int:
        try:
            with self.connect() as conn:
                return conn.execute(select(func.count()).select_from(SaleRecord)).scalar_one()
        except SQLAlchemyError as exc:
            raise QueryError(str(exc)) from exc

    def dispose(self) -> None:
        logger.debug("Disposing sale store engine %s", self.engine.url)
        self.engine.dispose()


__all__ = ["SaleStore"]
