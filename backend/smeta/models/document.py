# backend/smeta/models/document.py
import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from ..database import Base
from .columns import add_updated_at_trigger, string_enum, utcnow


class Pillar(str, enum.Enum):
    PILLAR_1 = "pillar-1"
    PILLAR_2 = "pillar-2"
    PILLAR_3 = "pillar-3"
    PILLAR_4 = "pillar-4"
    KPIS = "kpis"
    CAPA = "capa"

    @property
    def requires_category(self) -> bool:
        return self not in (Pillar.KPIS, Pillar.CAPA)


class DocumentCategory(str, enum.Enum):
    POLICIES = "policies"
    PROCEDURES = "procedures"
    FORMS = "forms"
    EVIDENCE = "evidence"


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint("file_size > 0", name="ck_documents_file_size_positive"),
        CheckConstraint(
            "category IS NOT NULL OR pillar IN ('kpis', 'capa')",
            name="ck_documents_category_required"
        ),
        Index("idx_documents_pillar_category", "pillar", "category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(255), nullable=False)
    display_name = Column(Text, nullable=True)
    pillar = Column(string_enum(Pillar, "ck_documents_pillar"), nullable=False, index=True)
    category = Column(string_enum(DocumentCategory, "ck_documents_category"), nullable=True)
    file_type = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    upload_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)
    file_path = Column(String(1024), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


add_updated_at_trigger(Document.__table__)
