# backend/smeta/api/search.py
import time

from fastapi import APIRouter, Depends, Query

from ..errors import InternalServerError, ValidationError
from ..repositories import DocumentRepository
from ..schemas.document import SearchResults
from ..utils.logging import api_logger
from .deps import get_document_repository

router = APIRouter(prefix="/api/search", tags=["search"])

MIN_QUERY_LENGTH = 2


@router.get("", response_model=SearchResults)
async def search_documents(
        q: str | None = Query(None),
        repository: DocumentRepository = Depends(get_document_repository)
):
    """Search documents by filename, pillar or category"""
    if q is None or not q.strip():
        raise ValidationError("Search term required")

    term = q.strip()
    if len(term) < MIN_QUERY_LENGTH:
        raise ValidationError(f"Search term must be at least {MIN_QUERY_LENGTH} characters")

    try:
        start_time = time.time()
        results = repository.search(term)

        api_logger.info("Search completed", extra={
            "query": term,
            "result_count": len(results),
            "execution_time_ms": round((time.time() - start_time) * 1000, 2)
        })
        return {"query": q, "count": len(results), "results": results}
    except Exception as e:
        api_logger.error("Search error", extra={"query": term, "error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to perform search") from e
