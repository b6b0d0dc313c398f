# backend/smeta/api/kpis.py
import time

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from fastapi.responses import FileResponse, RedirectResponse

from ..errors import InternalServerError, SmetaError, ValidationError
from ..models.kpi_item import KpiCategory
from ..repositories import KpiRepository
from ..schemas.kpi import KpiItemEnvelope, KpiItemList
from ..services.uploads import UploadService
from ..utils.logging import api_logger
from ..utils.validation import parse_enum
from .deps import get_kpi_repository, get_upload_service

router = APIRouter(prefix="/api/kpis", tags=["kpis"])

# Packages are rendered in an iframe by the dashboard
PACKAGE_HEADERS = {
    "X-Frame-Options": "SAMEORIGIN",
    "Content-Security-Policy": "default-src 'self' 'unsafe-inline' 'unsafe-eval' data: blob:;"
}


@router.get("", response_model=KpiItemList)
async def list_kpi_items(repository: KpiRepository = Depends(get_kpi_repository)):
    try:
        items = repository.list_all()
        api_logger.info(f"Found {len(items)} KPI items")
        return {"items": items}
    except Exception as e:
        api_logger.error("Error fetching KPI items", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to fetch KPI items") from e


@router.get("/category/{category}", response_model=KpiItemList)
async def list_kpi_items_by_category(category: str, repository: KpiRepository = Depends(get_kpi_repository)):
    category_value = parse_enum(KpiCategory, category, "category")

    try:
        return {"items": repository.list_by_category(category_value)}
    except Exception as e:
        api_logger.error("Error fetching KPI items by category", extra={
            "category": category,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to fetch KPI items") from e


@router.post("/upload", response_model=KpiItemEnvelope, status_code=201)
async def upload_kpi_item(
        file: UploadFile | None = File(None),
        title: str | None = Form(None),
        category: str | None = Form(None),
        file_type: str | None = Form(None, alias="fileType"),
        repository: KpiRepository = Depends(get_kpi_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    """Upload a single file or a ZIP HTML package"""
    if file is None:
        raise ValidationError("No file uploaded")

    api_logger.info("Uploading KPI item", extra={
        "original_name": file.filename,
        "content_type": file.content_type,
        "category": category,
        "kpi_file_type": file_type
    })

    try:
        start_time = time.time()
        item = await upload_service.store_kpi_item(
            file,
            repository,
            title=title,
            category=category,
            file_type=file_type
        )

        api_logger.info("Successfully uploaded KPI item", extra={
            "kpi_item_id": item.id,
            "folder_path": item.folder_path,
            "execution_time_ms": round((time.time() - start_time) * 1000, 2)
        })
        return {"item": item}

    except SmetaError as e:
        api_logger.warning("KPI upload rejected", extra={
            "original_name": file.filename,
            "reason": e.message
        })
        raise
    except Exception as e:
        api_logger.error("Error uploading KPI item", extra={
            "original_name": file.filename,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to upload KPI item") from e


@router.get("/{item_id}", response_model=KpiItemEnvelope)
async def get_kpi_item(item_id: int, repository: KpiRepository = Depends(get_kpi_repository)):
    try:
        return {"item": repository.get_by_id(item_id)}
    except SmetaError:
        api_logger.warning("KPI item not found", extra={"kpi_item_id": item_id})
        raise
    except Exception as e:
        api_logger.error("Get KPI item error", extra={
            "kpi_item_id": item_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to fetch KPI item") from e


@router.get("/{item_id}/view")
async def view_kpi_item(
        item_id: int,
        repository: KpiRepository = Depends(get_kpi_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    """Serve a package's index.html, or send single files to the download route"""
    try:
        item = repository.get_by_id(item_id)
        if not item.has_index_html:
            return RedirectResponse(url=f"/api/kpis/{item_id}/download", status_code=302)
        index_path = upload_service.kpi_index(item)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error("View KPI item error", extra={
            "kpi_item_id": item_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to view KPI item") from e

    return FileResponse(index_path, media_type="text/html", headers=PACKAGE_HEADERS)


@router.get("/{item_id}/download")
async def download_kpi_item(
        item_id: int,
        repository: KpiRepository = Depends(get_kpi_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    try:
        item = repository.get_by_id(item_id)
        file_path = upload_service.kpi_file(item)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error("Download KPI item error", extra={
            "kpi_item_id": item_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to download KPI item") from e

    return FileResponse(file_path, filename=file_path.name)


@router.get("/{item_id}/{asset_path:path}")
async def get_kpi_package_asset(
        item_id: int,
        asset_path: str,
        repository: KpiRepository = Depends(get_kpi_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    """Static assets (CSS, JS, images) referenced by a package's index.html"""
    try:
        item = repository.get_by_id(item_id)
        file_path = upload_service.kpi_asset(item, asset_path)
    except SmetaError as e:
        api_logger.warning("KPI asset request refused", extra={
            "kpi_item_id": item_id,
            "asset_path": asset_path,
            "reason": e.message
        })
        raise
    except Exception as e:
        api_logger.error("KPI asset error", extra={
            "kpi_item_id": item_id,
            "asset_path": asset_path,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to fetch KPI asset") from e

    return FileResponse(file_path)


@router.delete("/{item_id}", status_code=204, response_class=Response)
async def delete_kpi_item(
        item_id: int,
        repository: KpiRepository = Depends(get_kpi_repository),
        upload_service: UploadService = Depends(get_upload_service)
):
    api_logger.info("Deleting KPI item", extra={"kpi_item_id": item_id})

    try:
        upload_service.delete_kpi_item(repository, item_id)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error("Error deleting KPI item", extra={
            "kpi_item_id": item_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to delete KPI item") from e

    return Response(status_code=204)
