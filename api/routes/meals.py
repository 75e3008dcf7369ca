"""Meal routes - multipart create/update with optional photo upload"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError

from api.dependencies import get_meal_service
from app.exceptions import ServiceValidationError
from domain.models import PhotoUpload
from domain.schemas import MealInput
from services import MealService

router = APIRouter(prefix="/api/meals", tags=["Meals"])
logger = logging.getLogger("menuboard.api.meals")


def parse_meal_payload(meal: Optional[str], heading: Optional[str] = None) -> MealInput:
    """
    Decode the ``meal`` form field (a JSON object string).

    A separate ``heading`` form field, when sent, overrides ``headingId``.

    Raises:
        ServiceValidationError: If the field is missing or not a JSON object
    """
    if meal is None:
        raise ServiceValidationError("Missing meal data", details={"field": "meal"})
    try:
        data = json.loads(meal)
    except json.JSONDecodeError as e:
        raise ServiceValidationError(f"Meal data is not valid JSON: {e.msg}")
    if not isinstance(data, dict):
        raise ServiceValidationError("Meal data must be a JSON object")
    if heading is not None:
        data["headingId"] = heading
    try:
        return MealInput.model_validate(data)
    except ValidationError as e:
        raise ServiceValidationError(
            "Invalid meal data",
            details={"errors": e.errors(include_url=False, include_context=False)},
        )


def read_upload(
    photo: Optional[UploadFile], max_bytes: Optional[int] = None
) -> Optional[PhotoUpload]:
    """Turn the optional ``photo`` part into a PhotoUpload.

    Browsers send an empty part with no filename when no file was picked;
    that counts as no upload. With ``max_bytes`` at most one byte past the
    ceiling is read, enough for the asset store to reject the file.
    """
    if photo is None or not photo.filename:
        return None
    if max_bytes is None:
        content = photo.file.read()
    else:
        content = photo.file.read(max_bytes + 1)
    return PhotoUpload(
        content=content,
        filename=photo.filename,
        content_type=photo.content_type or "",
    )


@router.get("", response_model=List[Dict[str, Any]])
def list_meals(service: MealService = Depends(get_meal_service)):
    """List all meals"""
    return [m.to_response() for m in service.list_meals()]


@router.get("/{meal_id}", response_model=Dict[str, Any])
def get_meal(meal_id: str, service: MealService = Depends(get_meal_service)):
    """Get a single meal by ID"""
    return service.get_meal(meal_id).to_response()


@router.post("", response_model=Dict[str, Any])
def create_meal(
    meal: Optional[str] = Form(None, description="JSON-encoded meal fields"),
    heading: Optional[str] = Form(None, description="Heading ID, overrides headingId"),
    photo: Optional[UploadFile] = File(None, description="Optional meal photo"),
    service: MealService = Depends(get_meal_service),
):
    """
    Create a meal.

    - **meal**: JSON object with `name` and `description` (required),
      `halfServeAvailable` and `headingId`
    - **photo**: image file, at most 5MB by default
    """
    fields = parse_meal_payload(meal, heading)
    created = service.create_meal(fields, read_upload(photo, service.assets.max_bytes))
    return created.to_response()


@router.put("/{meal_id}", response_model=Dict[str, Any])
def update_meal(
    meal_id: str,
    meal: Optional[str] = Form(None, description="JSON-encoded meal fields"),
    heading: Optional[str] = Form(None, description="Heading ID, overrides headingId"),
    photo: Optional[UploadFile] = File(None, description="Replacement meal photo"),
    service: MealService = Depends(get_meal_service),
):
    """
    Update a meal. Only supplied fields change.

    Sending a new **photo** replaces (and deletes) the old one; without it
    the current photo is kept.
    """
    fields = parse_meal_payload(meal, heading)
    updated = service.update_meal(meal_id, fields, read_upload(photo, service.assets.max_bytes))
    return updated.to_response()


@router.delete("/{meal_id}", response_model=Dict[str, Any])
def delete_meal(meal_id: str, service: MealService = Depends(get_meal_service)):
    """Delete a meal and its photo"""
    return service.delete_meal(meal_id).to_response()
