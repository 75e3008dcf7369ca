from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any

from domain.models.menu import coerce_reference


class MealInput(BaseModel):
    """Fields a client may supply when creating or updating a meal.

    Every field is optional at parse time: required-field checks belong to
    the meal service so create and partial update share one schema.
    ``photo`` and ``id`` are ignored, photos only change through uploads.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    half_serve_available: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices(
            "halfServeAvailable", "halfServe", "half_serve_available"
        ),
    )
    heading_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("headingId", "heading", "heading_id"),
    )

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("heading_id", mode="before")
    @classmethod
    def normalize_heading(cls, v):
        return coerce_reference(v)

    def supplied(self) -> Dict[str, Any]:
        """Only the fields the client actually sent"""
        supplied = self.model_dump(exclude_unset=True)
        # an explicit null flag means "leave as is"
        if supplied.get("half_serve_available", False) is None:
            del supplied["half_serve_available"]
        return supplied


class HeadingInput(BaseModel):
    """Body of POST/PUT /api/headings"""

    name: Optional[str] = Field(None, description="Heading label")


class MenuDataResponse(BaseModel):
    """Full menu snapshot returned by GET /api/data"""

    meals: List[Dict[str, Any]]
    headings: List[Dict[str, Any]]
