"""Heading (menu category) routes"""

from fastapi import APIRouter, Depends
import logging
from typing import Any, Dict, List

from api.dependencies import get_heading_service
from domain.schemas import HeadingInput
from services import HeadingService

router = APIRouter(prefix="/api/headings", tags=["Headings"])
logger = logging.getLogger("menuboard.api.headings")


@router.get("", response_model=List[Dict[str, Any]])
def list_headings(service: HeadingService = Depends(get_heading_service)):
    """List all headings"""
    return [h.to_response() for h in service.list_headings()]


@router.post("", response_model=Dict[str, Any])
def create_heading(
    payload: HeadingInput, service: HeadingService = Depends(get_heading_service)
):
    """Create a heading"""
    return service.create_heading(payload.name).to_response()


@router.put("/{heading_id}", response_model=Dict[str, Any])
def rename_heading(
    heading_id: str,
    payload: HeadingInput,
    service: HeadingService = Depends(get_heading_service),
):
    """Rename a heading"""
    return service.rename_heading(heading_id, payload.name).to_response()


@router.delete("/{heading_id}", response_model=Dict[str, Any])
def delete_heading(heading_id: str, service: HeadingService = Depends(get_heading_service)):
    """
    Delete a heading.

    Meals that reference it keep their `headingId` unchanged.
    """
    return service.delete_heading(heading_id).to_response()
