"""Health check route"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_container
from services import ServiceContainer

router = APIRouter(tags=["Health"])
logger = logging.getLogger("menuboard.api.health")


@router.get("/health-check")
def health_check(container: ServiceContainer = Depends(get_container)):
    """Basic health check endpoint"""
    return {
        "status": "ok",
        "service": container.settings.app_name,
        "storage_backend": container.stores.backend.value,
    }
