# backend/smeta/api/health.py
import time
from datetime import datetime, timezone

from fastapi import APIRouter

from ..utils.logging import api_logger

router = APIRouter(prefix="/api", tags=["health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
async def health_check():
    start_time = time.time()
    response = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3)
    }
    api_logger.debug("Health check OK", extra={
        "execution_time_ms": round((time.time() - start_time) * 1000, 2)
    })
    return response
