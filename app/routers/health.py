"""
System health check endpoint.
Returns status of backend + DB + mail gateway configuration.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from datetime import datetime, timezone

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether owner notifications are sent or only logged
    """
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": "ok",
        "database": "unknown",
        "mail": "configured" if settings.MAIL_HOST else "disabled",
        "writes": "enabled" if settings.ADMIN_KEY else "locked (ADMIN_KEY not set)",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
