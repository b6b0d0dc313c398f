# backend/smeta/models/kpi_item.py
import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from ..database import Base
from .columns import add_updated_at_trigger, string_enum, utcnow


class KpiCategory(str, enum.Enum):
    STATISTICS = "statistics"
    RESEARCH = "research"
    KPIS = "kpis"
    ORG_CHART = "org-chart"
    BUSINESS_PLAN = "business-plan"


class KpiFileType(str, enum.Enum):
    PDF = "pdf"
    XLSX = "xlsx"
    DOCX = "docx"
    JPG = "jpg"
    PNG = "png"
    HTML_PACKAGE = "html-package"


class KpiItem(Base):
    __tablename__ = "kpi_items"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    category = Column(string_enum(KpiCategory, "ck_kpi_items_category"), nullable=False, index=True)
    file_type = Column(string_enum(KpiFileType, "ck_kpi_items_file_type"), nullable=False, index=True)
    upload_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    folder_path = Column(String(1024), nullable=False, unique=True)
    has_index_html = Column(Boolean, nullable=False, default=False, server_default='0')
    file_name = Column(String(255), nullable=True)  # the stored file for non-package items
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


add_updated_at_trigger(KpiItem.__table__)
