# backend/smeta/services/__init__.py
from .archives import extract_html_package
from .uploads import UploadService, DOCUMENT_MIME_TYPES, KPI_MIME_TYPES

__all__ = ["UploadService", "extract_html_package", "DOCUMENT_MIME_TYPES", "KPI_MIME_TYPES"]
