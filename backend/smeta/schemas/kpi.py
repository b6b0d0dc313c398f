# backend/smeta/schemas/kpi.py
from datetime import datetime
from typing import List, Optional

from .base import BaseSchema
from ..models.kpi_item import KpiCategory, KpiFileType


class KpiItemCreate(BaseSchema):
    title: str
    category: KpiCategory
    file_type: KpiFileType
    folder_path: str
    has_index_html: bool = False
    file_name: Optional[str] = None


class KpiItem(BaseSchema):
    id: int
    title: str
    category: KpiCategory
    file_type: KpiFileType
    upload_date: datetime
    folder_path: str
    has_index_html: bool
    file_name: Optional[str] = None


class KpiItemEnvelope(BaseSchema):
    item: KpiItem


class KpiItemList(BaseSchema):
    items: List[KpiItem]
