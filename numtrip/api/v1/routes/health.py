"""Health check endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from numtrip.core.database_init import check_database_health
from numtrip.infrastructure.persistence.db import get_db

router = APIRouter()


@router.get("/health/detailed", tags=["health"])
async def detailed_health_check(response: Response, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Detailed health check with dependency checks.

    Returns HTTP 200 if the database answers, HTTP 503 otherwise.
    """
    database_ok = check_database_health(db)

    if database_ok:
        response.status_code = status.HTTP_200_OK
    else:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if database_ok else "unhealthy",
        "components": {"database": "healthy" if database_ok else "unhealthy"},
    }
