# backend/smeta/models/capa.py
import enum

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from ..database import Base
from .columns import add_updated_at_trigger, string_enum, utcnow


class CapaStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class CapaSeverity(str, enum.Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    OBSERVATION = "observation"


class CapaPillar(str, enum.Enum):
    PILLAR_1 = "pillar-1"
    PILLAR_2 = "pillar-2"
    PILLAR_3 = "pillar-3"
    PILLAR_4 = "pillar-4"


class Capa(Base):
    __tablename__ = "capas"

    id = Column(Integer, primary_key=True, index=True)
    capa_id = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    pillar = Column(string_enum(CapaPillar, "ck_capas_pillar"), nullable=True, index=True)
    severity = Column(string_enum(CapaSeverity, "ck_capas_severity"), nullable=True)
    status = Column(
        string_enum(CapaStatus, "ck_capas_status"),
        nullable=False,
        default=CapaStatus.OPEN,
        server_default=CapaStatus.OPEN.value,
        index=True
    )
    date_opened = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    date_due = Column(DateTime(timezone=True), nullable=True)
    date_closed = Column(DateTime(timezone=True), nullable=True)
    root_cause = Column(Text, nullable=True)
    corrective_action = Column(Text, nullable=True)
    preventive_action = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())


add_updated_at_trigger(Capa.__table__)
