"""
Menu entities - meals, headings and uploaded photos.

Records are persisted in their wire shape (camelCase keys) so the JSON
document, the MongoDB collections and API responses all agree. Legacy keys
written by older clients (``halfServe``, ``heading``) are accepted on input.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def coerce_reference(value: Any) -> Optional[str]:
    """Normalize an id-like reference (ObjectId, int, "") to ``str`` or None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class Meal(BaseModel):
    """A dish on the menu"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    description: str
    photo: str = ""
    half_serve_available: bool = Field(
        default=False,
        alias="halfServeAvailable",
        validation_alias=AliasChoices(
            "halfServeAvailable", "halfServe", "half_serve_available"
        ),
    )
    heading_id: Optional[str] = Field(
        default=None,
        alias="headingId",
        validation_alias=AliasChoices("headingId", "heading", "heading_id"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    @field_validator("photo", mode="before")
    @classmethod
    def empty_photo(cls, v):
        # absent and "" both mean "no photo"
        return v or ""

    @field_validator("heading_id", mode="before")
    @classmethod
    def normalize_heading(cls, v):
        return coerce_reference(v)

    def to_record(self) -> dict:
        """Persisted representation (without the store-owned id)"""
        return self.model_dump(by_alias=True, exclude={"id"})

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)


class Heading(BaseModel):
    """A menu category label"""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    def to_response(self) -> dict:
        return self.model_dump()


@dataclass(frozen=True)
class PhotoUpload:
    """An uploaded photo waiting to be handed to the asset store"""

    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)
