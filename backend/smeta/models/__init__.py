from ..database import Base
from .document import Document, Pillar, DocumentCategory
from .capa import Capa, CapaStatus, CapaSeverity, CapaPillar
from .kpi_item import KpiItem, KpiCategory, KpiFileType

__all__ = [
    "Base",
    "Document",
    "Pillar",
    "DocumentCategory",
    "Capa",
    "CapaStatus",
    "CapaSeverity",
    "CapaPillar",
    "KpiItem",
    "KpiCategory",
    "KpiFileType"
]
