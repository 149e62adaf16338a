from fastapi import Request

from salesdash.config import Settings, get_settings
from salesdash.database.store import SaleStore


def get_store(request: Request) -> SaleStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


__all__ = ["get_app_settings", "get_store"]
