# backend/smeta/schemas/capa.py
from datetime import datetime
from typing import Optional

from pydantic import field_validator

from .base import BaseSchema
from ..models.capa import CapaPillar, CapaSeverity, CapaStatus


def _required_text(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


class CapaBase(BaseSchema):
    pillar: Optional[CapaPillar] = None
    severity: Optional[CapaSeverity] = None
    date_due: Optional[datetime] = None
    root_cause: Optional[str] = None
    corrective_action: Optional[str] = None
    preventive_action: Optional[str] = None


class CapaCreate(CapaBase):
    capa_id: str
    description: str
    status: CapaStatus = CapaStatus.OPEN
    date_opened: Optional[datetime] = None
    date_closed: Optional[datetime] = None

    @field_validator("capa_id", "description")
    @classmethod
    def check_required_text(cls, value: str) -> str:
        return _required_text(value)


class CapaUpdate(CapaBase):
    """Sparse update: only fields present in the request body are applied"""
    capa_id: Optional[str] = None
    description: Optional[str] = None
    status: Optional[CapaStatus] = None
    date_closed: Optional[datetime] = None

    # Explicit nulls are rejected here; absent fields never reach validators
    @field_validator("capa_id", "description")
    @classmethod
    def check_required_text(cls, value: Optional[str]) -> str:
        return _required_text(value)

    @field_validator("status")
    @classmethod
    def check_status(cls, value: Optional[CapaStatus]) -> CapaStatus:
        if value is None:
            raise ValueError("status cannot be null")
        return value


class Capa(CapaBase):
    id: int
    capa_id: str
    description: str
    status: CapaStatus
    date_opened: datetime
    date_closed: Optional[datetime] = None
