# backend/smeta/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..config import Settings
from ..database import get_db
from ..repositories import CapaRepository, DocumentRepository, KpiRepository
from ..services.uploads import UploadService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_document_repository(db: Session = Depends(get_db)) -> DocumentRepository:
    return DocumentRepository(db)


def get_capa_repository(db: Session = Depends(get_db)) -> CapaRepository:
    return CapaRepository(db)


def get_kpi_repository(db: Session = Depends(get_db)) -> KpiRepository:
    return KpiRepository(db)
