"""Full menu snapshot route"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_container
from domain.schemas import MenuDataResponse
from services import ServiceContainer

router = APIRouter(prefix="/api", tags=["Menu"])
logger = logging.getLogger("menuboard.api.data")


@router.get("/data", response_model=MenuDataResponse)
def get_menu_data(container: ServiceContainer = Depends(get_container)):
    """All meals and all headings, the same shape on every storage backend"""
    return {
        "meals": [m.to_response() for m in container.meals.list_meals()],
        "headings": [h.to_response() for h in container.headings.list_headings()],
    }
