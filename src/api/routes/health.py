"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from adapter.sql.connection import ping

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health(request: Request):
    """Health check endpoint with dependency status."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    overall_healthy = bool(getattr(request.app.state, "ready", False))
    if not overall_healthy:
        health_status["services"]["app"] = {
            "status": "unhealthy",
            "message": "Startup not complete"
        }

    engine = getattr(request.app.state, "engine", None)
    if engine is not None and ping(engine):
        health_status["services"]["database"] = {
            "status": "healthy",
            "message": "Connection successful"
        }
    else:
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "message": "Connection failed or not configured"
        }
        overall_healthy = False

    if not overall_healthy:
        health_status["status"] = "degraded"

    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )
