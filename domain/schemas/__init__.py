"""
Domain schemas package - Pydantic models for request validation.
"""

from domain.schemas.menu_schemas import MealInput, HeadingInput, MenuDataResponse

__all__ = [
    "MealInput",
    "HeadingInput",
    "MenuDataResponse",
]
