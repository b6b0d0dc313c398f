from .documents import DocumentRepository
from .capas import CapaRepository
from .kpis import KpiRepository

__all__ = ["DocumentRepository", "CapaRepository", "KpiRepository"]
