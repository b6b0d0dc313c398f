# backend/smeta/schemas/document.py
from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from .base import BaseSchema
from ..errors import ValidationError
from ..models.document import DocumentCategory, Pillar
from ..utils.validation import sanitize_display_name


class Document(BaseSchema):
    id: int
    filename: str
    original_filename: str
    display_name: Optional[str] = None
    pillar: Pillar
    category: Optional[DocumentCategory] = None
    file_type: str
    file_size: int
    upload_date: datetime
    file_path: str


class DocumentCreate(BaseSchema):
    filename: str
    original_filename: str
    display_name: Optional[str] = None
    pillar: Pillar
    category: Optional[DocumentCategory] = None
    file_type: str
    file_size: int
    file_path: str


class DocumentUpdate(BaseSchema):
    display_name: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, value: Optional[str]) -> Optional[str]:
        try:
            return sanitize_display_name(value)
        except ValidationError as exc:
            raise ValueError(exc.message) from exc


class SearchResults(BaseSchema):
    query: str
    count: int
    results: List[Document]

