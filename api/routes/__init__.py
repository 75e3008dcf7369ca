"""API routes package"""

from . import data, headings, meals, health

__all__ = ["data", "headings", "meals", "health"]
