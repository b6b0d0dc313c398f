# backend/smeta/api/documents.py
import time
from typing import List

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from fastapi.responses import FileResponse

from ..errors import InternalServerError, SmetaError, ValidationError
from ..models.document import DocumentCategory, Pillar
from ..repositories import DocumentRepository
from ..schemas.document import Document as DocumentSchema, DocumentUpdate
from ..services.uploads import UploadService
from ..utils.logging import api_logger
from ..utils.validation import parse_enum
from .deps import get_document_repository, get_upload_service

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.get("/counts")
async def get_document_counts(repository: DocumentRepository = Depends(get_document_repository)):
    """Document counts grouped by pillar and category"""
    try:
        counts = repository.counts()
        api_logger.debug("Computed document counts", extra={"grand_total": counts["grandTotal"]})
        return counts
    except Exception as e:
        api_logger.error("Get counts error", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to retrieve document counts") from e


@router.get("", response_model=List[DocumentSchema])
async def list_documents(repository: DocumentRepository = Depends(get_document_repository)):
    try:
        documents = repository.list_all()
        api_logger.info(f"Found {len(documents)} documents")
        return documents
    except Exception as e:
        api_logger.error("List documents error", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to retrieve documents") from e


@router.get("/pillar/{pillar}/category/{category}", response_model=List[DocumentSchema])
async def list_documents_by_pillar_and_category(
        pillar: str,
        category: str,
        repository: DocumentRepository = Depends(get_document_repository)
):
    pillar_value = parse_enum(Pillar, pillar, "pillar")
    category_value = parse_enum(DocumentCategory, category, "category")

    try:
        return repository.list_by_pillar_and_category(pillar_value, category_value)
    except Exception as e:
        api_logger.error("Filter documents error", extra={
            "pillar": pillar,
            "category": category,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to retrieve documents") from e


@router.get("/pillar/{pillar}", response_model=List[DocumentSchema])
async def list_documents_by_pillar(
        pillar: str,
        repository: DocumentRepository = Depends(get_document_repository)
):
    pillar_value = parse_enum(Pillar, pillar, "pillar")

    try:
        return repository.list_by_pillar(pillar_value)
    except Exception as e:
        api_logger.error("Filter documents by pillar error", extra={
            "pillar": pillar,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to retrieve documents") from e


@router.post("/upload", response_model=DocumentSchema, status_code=201)
async def upload_document(
        file: UploadFile | None = File(None),
        pillar: str | None = Form(None),
        category: str | None = Form(None),
        display_name: str | None = Form(None, alias="displayName"),
        repository: DocumentRepository = Depends(get_document_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    if file is None:
        raise ValidationError("File is required")

    api_logger.info("Uploading document", extra={
        "original_name": file.filename,
        "content_type": file.content_type,
        "pillar": pillar,
        "category": category
    })

    try:
        start_time = time.time()
        document = await upload_service.store_document(
            file,
            repository,
            pillar=pillar,
            category=category,
            display_name=display_name
        )

        execution_time = time.time() - start_time
        api_logger.info("Successfully uploaded document", extra={
            "document_id": document.id,
            "file_path": document.file_path,
            "execution_time_ms": round(execution_time * 1000, 2)
        })
        return document

    except SmetaError as e:
        api_logger.warning("Document upload rejected", extra={
            "original_name": file.filename,
            "reason": e.message
        })
        raise
    except Exception as e:
        api_logger.error("Upload error", extra={
            "original_name": file.filename,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to upload document") from e


@router.get("/{document_id}/download")
async def download_document(
        document_id: int,
        repository: DocumentRepository = Depends(get_document_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    """Stream the stored file; PDFs open inline, everything else downloads"""
    try:
        document = repository.get_by_id(document_id)
        file_path = upload_service.document_file(document)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error("Download document error", extra={
            "document_id": document_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to download document") from e

    disposition = "inline" if document.file_type == "application/pdf" else "attachment"
    return FileResponse(
        file_path,
        media_type=document.file_type,
        filename=document.original_filename,
        content_disposition_type=disposition
    )


@router.get("/{document_id}", response_model=DocumentSchema)
async def get_document(document_id: int, repository: DocumentRepository = Depends(get_document_repository)):
    api_logger.debug("Retrieving document", extra={"document_id": document_id})

    try:
        return repository.get_by_id(document_id)
    except SmetaError:
        api_logger.warning("Document not found", extra={"document_id": document_id})
        raise
    except Exception as e:
        api_logger.error("Get document error", extra={
            "document_id": document_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to retrieve document") from e


@router.put("/{document_id}", response_model=DocumentSchema)
async def update_document(
        document_id: int,
        document: DocumentUpdate,
        repository: DocumentRepository = Depends(get_document_repository)
):
    api_logger.info("Updating document", extra={
        "document_id": document_id,
        "update_fields": list(document.model_dump(exclude_unset=True).keys())
    })

    try:
        return repository.update(document_id, document)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error("Update document error", extra={
            "document_id": document_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to update document") from e


@router.delete("/{document_id}", status_code=204, response_class=Response)
async def delete_document(
        document_id: int,
        repository: DocumentRepository = Depends(get_document_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    """Delete both the database record and the stored file"""
    api_logger.info("Deleting document", extra={"document_id": document_id})

    try:
        upload_service.delete_document(repository, document_id)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error(f"Failed to delete document: {str(e)}", extra={
            "document_id": document_id
        }, exc_info=True)
        raise InternalServerError("Failed to delete document") from e

    api_logger.info(f"Successfully deleted document {document_id}")
    return Response(status_code=204)
