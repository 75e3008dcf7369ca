"""Repository factory for the persistence layer.

The backend is chosen once from ``Settings.storage_backend`` and stays fixed
for the lifetime of the process:

- ``json`` (default): one JSON document on disk holding meals and headings
- ``mongodb``: one MongoDB collection per record type

Usage:
    stores = create_record_stores(settings)
    stores.meals.get_all()
"""

import logging
from dataclasses import dataclass
from typing import Optional

from adapters.json_adapter import JsonDocumentStore
from adapters.mongo_adapter import MongoConnection
from app.config import Settings, StorageBackend
from repositories.base import RecordRepository
from repositories.json_repository import JsonCollectionRepository
from repositories.mongo_repository import MongoCollectionRepository

logger = logging.getLogger("menuboard.repositories.factory")


@dataclass
class RecordStores:
    """The two collections plus whatever connection backs them"""

    meals: RecordRepository
    headings: RecordRepository
    backend: StorageBackend
    mongo: Optional[MongoConnection] = None

    def close(self) -> None:
        if self.mongo is not None:
            self.mongo.close()


def create_json_stores(settings: Settings) -> RecordStores:
    document = JsonDocumentStore(settings.data_file)
    document.ensure_exists()
    logger.info("Using JSON record store at %s", settings.data_file.resolve())
    return RecordStores(
        meals=JsonCollectionRepository(document, "meals"),
        headings=JsonCollectionRepository(document, "headings"),
        backend=StorageBackend.JSON,
    )


def create_mongo_stores(
    settings: Settings, connection: Optional[MongoConnection] = None
) -> RecordStores:
    if connection is None:
        connection = MongoConnection(settings.mongo_uri, settings.mongo_db_name)
        connection.ping()
    logger.info("Using MongoDB record store (database: %s)", connection.db_name)
    return RecordStores(
        meals=MongoCollectionRepository(connection.collection("meals")),
        headings=MongoCollectionRepository(connection.collection("headings")),
        backend=StorageBackend.MONGODB,
        mongo=connection,
    )


def create_record_stores(settings: Settings) -> RecordStores:
    """Create the record stores selected by STORAGE_BACKEND"""
    if settings.storage_backend == StorageBackend.MONGODB:
        return create_mongo_stores(settings)
    return create_json_stores(settings)
