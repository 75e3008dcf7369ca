"""
Domain layer - Business entities and request schemas.
"""

from domain import models, schemas

__all__ = ["models", "schemas"]
