"""JSON document adapter for the flat-file record store.

The whole menu lives in one document shaped ``{"meals": [...], "headings": [...]}``.
Every operation reads the full document and every mutation rewrites it.
"""

import json
import logging
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

from app.exceptions import StorageIOError

logger = logging.getLogger("menuboard.json")

COLLECTIONS = ("meals", "headings")


def new_record_id() -> str:
    return uuid.uuid4().hex


def empty_document() -> Dict[str, List[Dict[str, Any]]]:
    return {name: [] for name in COLLECTIONS}


class JsonDocumentStore:
    """Owns the on-disk JSON document.

    Mutations go through :meth:`transaction`, which holds a process-wide lock
    for the whole read-modify-write cycle. Writers in other processes are not
    coordinated: the last one to replace the file wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def ensure_exists(self) -> None:
        """Create the document with empty collections if it is missing"""
        with self._lock:
            if self.path.exists():
                return
            logger.info("Creating initial data file at %s", self.path.resolve())
            self.save(empty_document())

    def load(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Read and normalize the full document.

        Records written before ids were persisted get one assigned here, and
        the document is saved back so the ids stay stable.

        Raises:
            StorageIOError: If the file cannot be read or is not a valid document
        """
        with self._lock:
            if not self.path.exists():
                return empty_document()
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as exc:
                raise StorageIOError(f"Malformed data file {self.path}: {exc}") from exc
            except OSError as exc:
                raise StorageIOError(f"Cannot read data file {self.path}: {exc}") from exc

            if not isinstance(data, dict):
                raise StorageIOError(f"Data file {self.path} is not a JSON object")

            changed = False
            for name in COLLECTIONS:
                records = data.get(name)
                if records is None:
                    data[name] = records = []
                    changed = True
                if not isinstance(records, list):
                    raise StorageIOError(f"Collection '{name}' in {self.path} is not a list")
                for record in records:
                    if not isinstance(record, dict):
                        raise StorageIOError(f"Malformed record in '{name}' of {self.path}")
                    if not record.get("id"):
                        record["id"] = new_record_id()
                        changed = True

            if changed:
                logger.info("Assigned missing record ids in %s", self.path)
                self.save(data)
            return data

    def save(self, document: Dict[str, Any]) -> None:
        """
        Rewrite the full document.

        Writes to a temp file in the same directory and swaps it in, so readers
        never observe a half-written file.

        Raises:
            StorageIOError: If the document cannot be written
        """
        with self._lock:
            directory = self.path.parent
            tmp_name = None
            try:
                directory.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2)
                os.replace(tmp_name, self.path)
            except (OSError, TypeError, ValueError) as exc:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise StorageIOError(f"Cannot write data file {self.path}: {exc}") from exc
            logger.debug("Wrote data file %s", self.path)

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, List[Dict[str, Any]]]]:
        """Load the document, yield it for mutation, then save it.

        Nothing is written if the body raises.
        """
        with self._lock:
            document = self.load()
            yield document
            self.save(document)
