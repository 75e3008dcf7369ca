"""
Services package - Business logic layer.
"""

from services.meal_service import MealService
from services.heading_service import HeadingService
from services.container import ServiceContainer

__all__ = [
    "MealService",
    "HeadingService",
    "ServiceContainer",
]
