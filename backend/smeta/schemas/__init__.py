from .document import Document, DocumentCreate, DocumentUpdate, SearchResults
from .capa import Capa, CapaCreate, CapaUpdate
from .kpi import KpiItem, KpiItemCreate, KpiItemEnvelope, KpiItemList

__all__ = [
    "Document", "DocumentCreate", "DocumentUpdate", "SearchResults",
    "Capa", "CapaCreate", "CapaUpdate",
    "KpiItem", "KpiItemCreate", "KpiItemEnvelope", "KpiItemList"
]
