"""MongoDB adapter for the document-collection record store.
"""

from typing import Optional
import logging

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger("menuboard.mongo")


class MongoConnection:
    """Owns one MongoClient for the lifetime of the process.

    The client connects lazily, so constructing this never blocks; ``ping``
    is used at startup to report reachability.
    """

    def __init__(self, uri: str, db_name: str = "menuboard", client: Optional[MongoClient] = None):
        self.uri = uri
        self.db_name = db_name
        self._client = client if client is not None else MongoClient(uri)
        self._db: Database = self._client[db_name]

    @property
    def db(self) -> Database:
        return self._db

    def collection(self, name: str) -> Collection:
        return self._db[name]

    def ping(self) -> bool:
        """Check the server answers; failures are logged, not raised."""
        try:
            self._client.admin.command("ping")
            logger.info("Connected to MongoDB (database: %s)", self.db_name)
            return True
        except PyMongoError as exc:
            logger.warning("MongoDB not reachable yet (database: %s): %s", self.db_name, exc)
            return False

    def close(self):
        """Close MongoDB connection."""
        try:
            self._client.close()
            logger.info("MongoDB client closed")
        except PyMongoError:
            logger.exception("Error closing MongoDB client")
