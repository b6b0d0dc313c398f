# backend/smeta/api/__init__.py
from .health import router as health_router
from .documents import router as documents_router
from .search import router as search_router
from .capas import router as capas_router
from .kpis import router as kpis_router

__all__ = ["health_router", "documents_router", "search_router", "capas_router", "kpis_router"]
