"""
Liveness and dependency status
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db, ping
from app.core.logging_config import LoggingConfig
from app.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


def _base_report(settings: Settings) -> Dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.app_name,
    }


def _database_component(db: Session) -> Dict[str, Any]:
    error = ping(db)
    if error is None:
        return {"status": "healthy", "message": "Database connection successful"}

    logger.warning("Database health check failed", extra={"error_type": error})
    return {"status": "unhealthy", "message": "Database connection failed", "error": error}


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Process is up; touches nothing else"""
    return _base_report(settings)


@router.get("/health/detailed")
async def detailed_health_check(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Process plus contact store status

    The contact store is the only hard dependency, so only it can make the
    report unhealthy (503). The user directory backend is reported for
    information.
    """
    report = _base_report(settings)
    report["environment"] = settings.app_env
    report["components"] = {
        "database": _database_component(db),
        "user_directory": {"backend": "hosted" if settings.identity_directory_url else "local"},
    }

    if report["components"]["database"]["status"] != "healthy":
        report["status"] = "unhealthy"
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=report)
    return report
