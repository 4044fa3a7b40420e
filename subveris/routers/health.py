"""
Health Check Router
Service liveness and storage reachability
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from subveris.core.config import settings
from subveris.core.deps import get_store
from subveris.db.base import SubscriptionStore
from subveris.utils.scheduler import get_scheduler_status

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/status")
def services_status(store: SubscriptionStore = Depends(get_store)):
    """
    Check connectivity of the storage backend and the snapshot scheduler.
    """
    storage_status = {
        "backend": type(store).__name__,
        "connected": store.ping(),
    }
    if not storage_status["connected"]:
        logger.error(f"Storage check failed for {storage_status['backend']}")

    return {
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "storage": storage_status,
            "scheduler": get_scheduler_status(),
        },
        "overall_status": "healthy" if storage_status["connected"] else "degraded",
    }
