# backend/smeta/services/uploads.py
from pathlib import Path
from typing import Tuple

from fastapi import UploadFile

from ..config import Settings
from ..errors import NotFoundError, UnsupportedMediaTypeError, ValidationError
from ..models.document import Document, DocumentCategory, Pillar
from ..models.kpi_item import KpiCategory, KpiFileType, KpiItem
from ..repositories import DocumentRepository, KpiRepository
from ..schemas.document import DocumentCreate
from ..schemas.kpi import KpiItemCreate
from ..utils.files import (
    delete_file,
    generate_unique_name,
    get_relative_path,
    move_file,
    remove_directory,
    resolve_within,
    safe_filename,
    save_upload_file,
)
from ..utils.logging import service_logger
from ..utils.validation import parse_enum, require_text, sanitize_display_name
from .archives import INDEX_FILE, extract_html_package

DOCUMENT_MIME_TYPES = frozenset({
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",  # .docx
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",  # .xlsx
    "image/jpeg",
    "image/png",
})

KPI_MIME_TYPES = DOCUMENT_MIME_TYPES | {
    "application/zip",
    "application/x-zip-compressed",
    "application/octet-stream",  # Some browsers send ZIP files as octet-stream
}


class UploadService:
    """Moves uploads from the temp area into the storage tree and records their metadata"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _storage_path(self, relative_path: str) -> Path:
        return resolve_within(self.settings.STORAGE_PATH, relative_path)

    async def stage(self, upload_file: UploadFile, allowed_types: frozenset, max_size: int) -> Tuple[Path, int]:
        """Check the declared MIME type and stream the payload into the temp directory"""
        if upload_file.content_type not in allowed_types:
            service_logger.warning("Rejected upload with unsupported media type", extra={
                "original_name": upload_file.filename,
                "content_type": upload_file.content_type
            })
            raise UnsupportedMediaTypeError(
                "File type not supported. Allowed types: PDF, DOCX, XLSX, JPG, PNG"
                + (", ZIP" if "application/zip" in allowed_types else "")
            )

        temp_path, size = await save_upload_file(upload_file, self.settings.TEMP_PATH, max_size)
        if size == 0:
            delete_file(temp_path)
            raise ValidationError("Uploaded file is empty")
        return temp_path, size

    async def store_document(
            self,
            upload_file: UploadFile,
            repository: DocumentRepository,
            pillar: str | None,
            category: str | None = None,
            display_name: str | None = None
    ) -> Document:
        temp_path, size = await self.stage(upload_file, DOCUMENT_MIME_TYPES, self.settings.MAX_DOCUMENT_SIZE)
        final_path = None

        try:
            pillar_value = parse_enum(Pillar, pillar, "pillar")
            category_value = parse_enum(
                DocumentCategory, category, "category",
                required=pillar_value.requires_category
            )
            display_name = sanitize_display_name(display_name)

            destination = self.settings.DOCUMENTS_PATH / pillar_value.value
            if category_value is not None:
                destination = destination / category_value.value
            final_path = move_file(temp_path, destination)

            document = repository.create(DocumentCreate(
                filename=final_path.name,
                original_filename=safe_filename(upload_file.filename),
                display_name=display_name,
                pillar=pillar_value,
                category=category_value,
                file_type=upload_file.content_type,
                file_size=size,
                file_path=get_relative_path(final_path, self.settings.STORAGE_PATH)
            ))
        except BaseException:
            delete_file(temp_path)
            if final_path is not None:
                delete_file(final_path)
            raise

        service_logger.info("Stored document", extra={
            "document_id": document.id,
            "file_path": document.file_path,
            "file_size": size
        })
        return document

    def document_file(self, document: Document) -> Path:
        file_path = self._storage_path(document.file_path)
        if not file_path.is_file():
            raise NotFoundError("Document file not found on filesystem")
        return file_path

    def delete_document(self, repository: DocumentRepository, document_id: int) -> None:
        """Delete the row, then the file; a file left behind is only logged"""
        document = repository.get_by_id(document_id)
        file_path = self._storage_path(document.file_path)

        repository.delete(document_id)

        if not file_path.exists():
            service_logger.warning(f"File not found during deletion: {file_path}", extra={
                "document_id": document_id
            })
            return
        delete_file(file_path)

    async def store_kpi_item(
            self,
            upload_file: UploadFile,
            repository: KpiRepository,
            title: str | None,
            category: str | None,
            file_type: str | None
    ) -> KpiItem:
        temp_path, _ = await self.stage(upload_file, KPI_MIME_TYPES, self.settings.MAX_KPI_SIZE)
        item_folder = None

        try:
            title = require_text(title, "title")
            category_value = parse_enum(KpiCategory, category, "category")
            file_type_value = parse_enum(KpiFileType, file_type, "file type")

            item_folder = self.settings.KPIS_PATH / category_value.value / generate_unique_name()
            item_folder.mkdir(parents=True)

            is_package = file_type_value == KpiFileType.HTML_PACKAGE
            file_name = None
            if is_package:
                extract_html_package(temp_path, item_folder)
            else:
                file_name = safe_filename(upload_file.filename)
                move_file(temp_path, item_folder, file_name)

            item = repository.create(KpiItemCreate(
                title=title,
                category=category_value,
                file_type=file_type_value,
                folder_path=get_relative_path(item_folder, self.settings.STORAGE_PATH),
                has_index_html=is_package,
                file_name=file_name
            ))
        except BaseException:
            if item_folder is not None:
                remove_directory(item_folder)
            raise
        finally:
            delete_file(temp_path)

        service_logger.info("Stored KPI item", extra={
            "kpi_item_id": item.id,
            "folder_path": item.folder_path,
            "kpi_file_type": item.file_type.value
        })
        return item

    def kpi_folder(self, item: KpiItem) -> Path:
        folder = self._storage_path(item.folder_path)
        if not folder.is_dir():
            service_logger.error("KPI folder not found", extra={
                "kpi_item_id": item.id,
                "folder_path": item.folder_path
            })
            raise NotFoundError("KPI folder not found")
        return folder

    def kpi_index(self, item: KpiItem) -> Path:
        index_path = self.kpi_folder(item) / INDEX_FILE
        if not index_path.is_file():
            raise NotFoundError(f"{INDEX_FILE} not found")
        return index_path

    def kpi_file(self, item: KpiItem) -> Path:
        """The single stored file of a non-package item"""
        if item.has_index_html:
            raise ValidationError("HTML packages are opened through their view URL")

        folder = self.kpi_folder(item)
        if item.file_name:
            file_path = folder / item.file_name
            if not file_path.is_file():
                raise NotFoundError("File not found")
            return file_path

        # Rows created before file_name was recorded
        files = sorted(entry for entry in folder.iterdir() if entry.is_file())
        if not files:
            raise NotFoundError("No files found")
        return files[0]

    def kpi_asset(self, item: KpiItem, asset_path: str) -> Path:
        if not item.has_index_html:
            raise NotFoundError("Not found")

        file_path = resolve_within(self.kpi_folder(item), asset_path)
        if not file_path.is_file():
            raise NotFoundError("File not found")
        return file_path

    def delete_kpi_item(self, repository: KpiRepository, item_id: int) -> None:
        item = repository.get_by_id(item_id)
        folder = self._storage_path(item.folder_path)

        repository.delete(item_id)
        remove_directory(folder)
