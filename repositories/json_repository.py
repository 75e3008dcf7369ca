"""
JSON Repository - flat-file record store backed by a single JSON document
"""

import copy
import logging
from typing import List, Optional, Tuple

from adapters.json_adapter import COLLECTIONS, JsonDocumentStore, new_record_id
from repositories.base import Record, RecordRepository

logger = logging.getLogger("menuboard.repositories.json")


class JsonCollectionRepository(RecordRepository):
    """
    One collection inside the shared JSON document.

    Records are addressed by the stable ``id`` persisted on each of them,
    never by list position, so deleting one record cannot shift another's
    identity.
    """

    def __init__(self, document: JsonDocumentStore, collection: str):
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection '{collection}'")
        self.document = document
        self.collection = collection

    @staticmethod
    def _index_of(records: List[Record], record_id: str) -> Optional[int]:
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                return index
        return None

    def get_all(self) -> List[Record]:
        return self.document.load()[self.collection]

    def get_by_id(self, record_id: str) -> Optional[Record]:
        records = self.document.load()[self.collection]
        index = self._index_of(records, record_id)
        return records[index] if index is not None else None

    def create(self, record: Record) -> Record:
        stored = copy.deepcopy(record)
        stored["id"] = new_record_id()
        with self.document.transaction() as doc:
            doc[self.collection].append(stored)
        logger.debug("Inserted %s record %s", self.collection, stored["id"])
        return stored

    def update(self, record_id: str, fields: Record) -> Record:
        return self.update_returning_previous(record_id, fields)[1]

    def update_returning_previous(self, record_id: str, fields: Record) -> Tuple[Record, Record]:
        with self.document.transaction() as doc:
            records = doc[self.collection]
            index = self._index_of(records, record_id)
            if index is None:
                raise self._not_found(record_id)
            previous = records[index]
            updated = {**previous, **copy.deepcopy(fields), "id": record_id}
            records[index] = updated
        logger.debug("Updated %s record %s", self.collection, record_id)
        return previous, updated

    def delete(self, record_id: str) -> Record:
        with self.document.transaction() as doc:
            records = doc[self.collection]
            index = self._index_of(records, record_id)
            if index is None:
                raise self._not_found(record_id)
            removed = records.pop(index)
        logger.debug("Deleted %s record %s", self.collection, record_id)
        return removed
