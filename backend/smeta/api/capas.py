# backend/smeta/api/capas.py
from typing import List

from fastapi import APIRouter, Depends, Response

from ..errors import InternalServerError, SmetaError
from ..models.capa import CapaStatus
from ..repositories import CapaRepository
from ..schemas.capa import Capa as CapaSchema, CapaCreate, CapaUpdate
from ..utils.logging import api_logger
from ..utils.validation import parse_enum
from .deps import get_capa_repository

router = APIRouter(prefix="/api/capas", tags=["capas"])


@router.get("", response_model=List[CapaSchema])
async def list_capas(repository: CapaRepository = Depends(get_capa_repository)):
    """List all CAPAs, most recently opened first"""
    try:
        capas = repository.list_all()
        api_logger.info(f"Found {len(capas)} CAPAs")
        return capas
    except Exception as e:
        api_logger.error("Get all CAPAs error", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to retrieve CAPAs") from e


@router.get("/status/{status}", response_model=List[CapaSchema])
async def list_capas_by_status(status: str, repository: CapaRepository = Depends(get_capa_repository)):
    status_value = parse_enum(CapaStatus, status, "status")

    try:
        return repository.list_by_status(status_value)
    except Exception as e:
        api_logger.error("Get CAPAs by status error", extra={
            "status": status,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to retrieve CAPAs") from e


@router.get("/{capa_pk}", response_model=CapaSchema)
async def get_capa(capa_pk: int, repository: CapaRepository = Depends(get_capa_repository)):
    try:
        return repository.get_by_id(capa_pk)
    except SmetaError:
        api_logger.warning("CAPA not found", extra={"capa_pk": capa_pk})
        raise
    except Exception as e:
        api_logger.error("Get CAPA error", extra={
            "capa_pk": capa_pk,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to retrieve CAPA") from e


@router.post("", response_model=CapaSchema, status_code=201)
async def create_capa(capa: CapaCreate, repository: CapaRepository = Depends(get_capa_repository)):
    api_logger.info("Creating new CAPA", extra={"capa_id": capa.capa_id})

    try:
        db_capa = repository.create(capa)
        api_logger.info("CAPA created successfully", extra={
            "capa_pk": db_capa.id,
            "capa_id": db_capa.capa_id
        })
        return db_capa
    except SmetaError as e:
        api_logger.warning("CAPA creation rejected", extra={
            "capa_id": capa.capa_id,
            "reason": e.message
        })
        raise
    except Exception as e:
        api_logger.error("Create CAPA error", extra={
            "capa_id": capa.capa_id,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to create CAPA") from e


@router.put("/{capa_pk}", response_model=CapaSchema)
async def update_capa(
        capa_pk: int,
        capa: CapaUpdate,
        repository: CapaRepository = Depends(get_capa_repository)
):
    update_fields = capa.model_dump(exclude_unset=True)
    api_logger.info("Updating CAPA", extra={
        "capa_pk": capa_pk,
        "update_fields": list(update_fields.keys())
    })

    try:
        db_capa = repository.update(capa_pk, capa)
        api_logger.info("CAPA updated successfully", extra={
            "capa_pk": capa_pk,
            "status": db_capa.status.value
        })
        return db_capa
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error("Update CAPA error", extra={
            "capa_pk": capa_pk,
            "error": str(e)
        }, exc_info=True)
        raise InternalServerError("Failed to update CAPA") from e


@router.delete("/{capa_pk}", status_code=204, response_class=Response)
async def delete_capa(capa_pk: int, repository: CapaRepository = Depends(get_capa_repository)):
    api_logger.info("Deleting CAPA", extra={"capa_pk": capa_pk})

    try:
        repository.delete(capa_pk)
    except SmetaError:
        raise
    except Exception as e:
        api_logger.error(f"Failed to delete CAPA: {str(e)}", extra={"capa_pk": capa_pk}, exc_info=True)
        raise InternalServerError("Failed to delete CAPA") from e

    return Response(status_code=204)
