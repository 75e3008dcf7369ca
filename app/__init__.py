"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import Settings, Environment, StorageBackend
from app.exceptions import (
    ServiceValidationError,
    NotFoundError,
    StorageIOError,
)

__all__ = [
    "Settings",
    "Environment",
    "StorageBackend",
    "ServiceValidationError",
    "NotFoundError",
    "StorageIOError",
]
