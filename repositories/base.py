"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from app.exceptions import NotFoundError

Record = Dict[str, Any]

# Singular names used in client-facing not-found messages
ENTITY_LABELS = {"meals": "Meal", "headings": "Heading"}


class RecordRepository(ABC):
    """
    Contract shared by both record store backends.

    One repository instance serves one collection (meals or headings).
    Records are plain dicts that always carry a string ``id`` assigned by the
    store. Every backend failure surfaces as ``StorageIOError``.
    """

    collection: str

    @abstractmethod
    def get_all(self) -> List[Record]:
        """Full scan of the collection"""

    @abstractmethod
    def get_by_id(self, record_id: str) -> Optional[Record]:
        """
        Get record by ID.

        Returns:
            Record or None if not found (including malformed IDs)
        """

    @abstractmethod
    def create(self, record: Record) -> Record:
        """Insert a new record; the store assigns and returns its ID"""

    @abstractmethod
    def update(self, record_id: str, fields: Record) -> Record:
        """
        Merge ``fields`` into an existing record.

        Raises:
            NotFoundError: If no record has this ID
        """

    @abstractmethod
    def update_returning_previous(self, record_id: str, fields: Record) -> Tuple[Record, Record]:
        """
        Merge ``fields`` into an existing record in one atomic step.

        Returns:
            The record as it was before the change and as it is after

        Raises:
            NotFoundError: If no record has this ID
        """

    @abstractmethod
    def delete(self, record_id: str) -> Record:
        """
        Remove a record and return what was removed.

        Raises:
            NotFoundError: If no record has this ID
        """

    def exists(self, record_id: str) -> bool:
        """Check if record exists"""
        return self.get_by_id(record_id) is not None

    def _not_found(self, record_id: str) -> NotFoundError:
        label = ENTITY_LABELS.get(self.collection, "Record")
        return NotFoundError(
            f"{label} not found",
            details={"id": record_id},
        )
