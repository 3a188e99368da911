"""
Health check endpoints
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ..db import check_db_connection

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Envelope with health status and timestamp
    """
    return {
        "message": "success",
        "data": {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
def readiness_check(request: Request):
    """
    Readiness check endpoint with database status.

    Returns:
        Envelope with component status; 503 if the database is unreachable
    """
    db_connected = check_db_connection(request.app.state.engine)

    data = {
        "status": "ready" if db_connected else "not_ready",
        "database": "connected" if db_connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    if not db_connected:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": "service unavailable", "data": data},
        )

    return {"message": "success", "data": data}
