"""
Domain models package - menu entities.
"""

from domain.models.menu import Meal, Heading, PhotoUpload

__all__ = [
    "Meal",
    "Heading",
    "PhotoUpload",
]
