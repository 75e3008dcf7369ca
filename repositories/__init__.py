"""
Repositories package - Data access layer.
"""

from repositories.base import RecordRepository
from repositories.json_repository import JsonCollectionRepository
from repositories.mongo_repository import MongoCollectionRepository
from repositories.factory import RecordStores, create_record_stores

__all__ = [
    "RecordRepository",
    "JsonCollectionRepository",
    "MongoCollectionRepository",
    "RecordStores",
    "create_record_stores",
]
