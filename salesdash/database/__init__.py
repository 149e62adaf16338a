from salesdash.database.base import Base
from salesdash.database.engine import create_store_engine

__all__ = ["Base", "create_store_engine"]
