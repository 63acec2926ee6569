"""
Health check endpoints.

/health is for load balancers. /health/detailed reports on each collaborator
the intake flow needs: the application store, the video storage backend and
whether new-application notifications are switched on.
"""

import logging
from typing import Any, Callable, Dict
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import text

from recruiting.core.database import get_db
from recruiting.core.deps import get_notifier, get_storage
from recruiting.core.storage import StorageBackend
from recruiting.services.notifications import NotificationDispatcher

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _run_check(name: str, check: Callable[[], str]) -> Dict[str, str]:
    try:
        return {"status": "healthy", "message": check()}
    except Exception as e:
        logger.error(f"{name} health check failed: {e}")
        return {"status": "unhealthy", "message": f"{name} error: {str(e)}"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """Returns 200 OK while the process is serving requests."""
    return {
        "status": "healthy",
        "timestamp": _timestamp()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    notifier: NotificationDispatcher = Depends(get_notifier)
) -> Dict[str, Any]:
    """
    Status of the database and the video storage backend.

    A failing check marks the whole response unhealthy. Disabled
    notifications are reported but do not, since submissions still succeed
    without them.
    """
    def check_database() -> str:
        db.execute(text("SELECT 1"))
        return "Database connection successful"

    def check_storage() -> str:
        storage.check_access()
        return f"{type(storage).__name__} accessible"

    checks = {
        "database": _run_check("Database", check_database),
        "storage": _run_check("Storage", check_storage),
        "notifications": {
            "status": "enabled" if notifier.enabled else "disabled",
            "message": "New application emails are queued" if notifier.enabled else "RESEND_API_KEY not set",
        },
    }

    unhealthy = any(check["status"] == "unhealthy" for check in checks.values())
    return {
        "status": "unhealthy" if unhealthy else "healthy",
        "timestamp": _timestamp(),
        "checks": checks,
    }
