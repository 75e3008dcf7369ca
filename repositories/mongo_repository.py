"""
Mongo Repository - document-collection record store (MongoDB integration)
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.exceptions import StorageIOError
from repositories.base import Record, RecordRepository

logger = logging.getLogger("menuboard.repositories.mongo")


def _to_object_id(record_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError):
        return None


def _from_document(doc: Dict[str, Any]) -> Record:
    """Expose ``_id`` as a string ``id`` and stringify ObjectId references"""
    record = {k: v for k, v in doc.items() if k != "_id"}
    record["id"] = str(doc["_id"])
    for key, value in record.items():
        if isinstance(value, ObjectId):
            record[key] = str(value)
    return record


class MongoCollectionRepository(RecordRepository):
    """
    Repository over one MongoDB collection.

    Each record is its own document with a server-assigned ObjectId, and
    single-record updates and deletes rely on MongoDB's per-document
    atomicity.
    """

    def __init__(self, collection: Collection):
        self._collection = collection
        self.collection = collection.name

    def _fail(self, action: str, exc: PyMongoError) -> StorageIOError:
        logger.error("MongoDB %s on '%s' failed: %s", action, self.collection, exc)
        return StorageIOError(f"MongoDB {action} on '{self.collection}' failed: {exc}")

    def get_all(self) -> List[Record]:
        try:
            return [_from_document(doc) for doc in self._collection.find()]
        except PyMongoError as exc:
            raise self._fail("find", exc) from exc

    def get_by_id(self, record_id: str) -> Optional[Record]:
        oid = _to_object_id(record_id)
        if oid is None:
            return None
        try:
            doc = self._collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise self._fail("find_one", exc) from exc
        return _from_document(doc) if doc else None

    def create(self, record: Record) -> Record:
        doc = {k: v for k, v in record.items() if k not in ("id", "_id")}
        try:
            result = self._collection.insert_one(doc)
        except PyMongoError as exc:
            raise self._fail("insert", exc) from exc
        doc["_id"] = result.inserted_id
        return _from_document(doc)

    def update(self, record_id: str, fields: Record) -> Record:
        oid = _to_object_id(record_id)
        if oid is None:
            raise self._not_found(record_id)
        changes = {k: v for k, v in fields.items() if k not in ("id", "_id")}
        try:
            if changes:
                doc = self._collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
            else:
                doc = self._collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise self._fail("update", exc) from exc
        if doc is None:
            raise self._not_found(record_id)
        return _from_document(doc)

    def update_returning_previous(self, record_id: str, fields: Record) -> Tuple[Record, Record]:
        oid = _to_object_id(record_id)
        if oid is None:
            raise self._not_found(record_id)
        changes = {k: v for k, v in fields.items() if k not in ("id", "_id")}
        try:
            if changes:
                doc = self._collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.BEFORE,
                )
            else:
                doc = self._collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise self._fail("update", exc) from exc
        if doc is None:
            raise self._not_found(record_id)
        previous = _from_document(doc)
        return previous, {**previous, **_from_document({**changes, "_id": oid})}

    def delete(self, record_id: str) -> Record:
        oid = _to_object_id(record_id)
        if oid is None:
            raise self._not_found(record_id)
        try:
            doc = self._collection.find_one_and_delete({"_id": oid})
        except PyMongoError as exc:
            raise self._fail("delete", exc) from exc
        if doc is None:
            raise self._not_found(record_id)
        return _from_document(doc)

    def clear(self) -> int:
        """Delete every document in the collection (used by the migration script)"""
        try:
            return self._collection.delete_many({}).deleted_count
        except PyMongoError as exc:
            raise self._fail("delete_many", exc) from exc
