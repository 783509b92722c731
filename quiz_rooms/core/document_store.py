"""Document store boundary used for rooms, questions and participants.

The application never owns a schema: it reads whole collections, inserts
documents with store-assigned ids and patches individual fields. Collection
paths follow the ``Rooms/{roomId}/Participants`` convention, so nested
collections are simply addressed by their full path.

Architecture note:
    Two implementations share one lock-guarded core. The in-memory store is
    what tests and throwaway demos use; the JSON file store rewrites a single
    file after every write so a restarted server keeps its rooms and scores.
    Neither store offers transactions, which is why the join flow's
    "already joined" check can race with a concurrent insert.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime
import json
import logging
from pathlib import Path
from threading import Lock
from uuid import uuid4

from quiz_rooms.core.errors import DocumentNotFoundError, StoreError

logger = logging.getLogger(__name__)

ROOMS_COLLECTION = "Rooms"


def questions_path(room_id: str) -> str:
    return f"{ROOMS_COLLECTION}/{room_id}/Questions"


def participants_path(room_id: str) -> str:
    return f"{ROOMS_COLLECTION}/{room_id}/Participants"


@dataclass(slots=True)
class Document:
    """A stored document snapshot."""

    id: str
    data: dict[str, object]


class DocumentStore(ABC):
    """Collection reads, document inserts and document updates."""

    @abstractmethod
    def get_documents(self, path: str) -> list[Document]:
        """Return every document of a collection, in insertion order."""

    @abstractmethod
    def add_document(self, path: str, data: dict[str, object]) -> str:
        """Insert a document and return its store-assigned id."""

    @abstractmethod
    def update_document(self, path: str, doc_id: str, fields: dict[str, object]) -> None:
        """Merge ``fields`` into an existing document."""


class InMemoryDocumentStore(DocumentStore):
    """Thread-safe dictionary-backed store."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._collections: dict[str, dict[str, dict[str, object]]] = {}

    def get_documents(self, path: str) -> list[Document]:
        path = _normalize_path(path)
        with self._lock:
            collection = self._collections.get(path, {})
            return [Document(id=doc_id, data=deepcopy(data)) for doc_id, data in collection.items()]

    def add_document(self, path: str, data: dict[str, object]) -> str:
        path = _normalize_path(path)
        doc_id = uuid4().hex
        with self._lock:
            collections, collection = self._stage(path)
            collection[doc_id] = deepcopy(data)
            self._commit(collections)
        logger.debug("Added document %s to %s", doc_id, path)
        return doc_id

    def update_document(self, path: str, doc_id: str, fields: dict[str, object]) -> None:
        path = _normalize_path(path)
        with self._lock:
            if doc_id not in self._collections.get(path, {}):
                raise DocumentNotFoundError(f"No document {doc_id!r} in {path!r}")
            collections, collection = self._stage(path)
            collection[doc_id] = {**collection[doc_id], **deepcopy(fields)}
            self._commit(collections)
        logger.debug("Updated document %s in %s", doc_id, path)

    def _stage(self, path: str) -> tuple[dict[str, dict[str, dict[str, object]]], dict[str, dict[str, object]]]:
        """Copy the collection map and ``path``'s collection so a failed write leaves both untouched."""
        collections = dict(self._collections)
        collection = dict(collections.get(path, {}))
        collections[path] = collection
        return collections, collection

    def _commit(self, collections: dict[str, dict[str, dict[str, object]]]) -> None:
        self._collections = collections


class JsonFileDocumentStore(InMemoryDocumentStore):
    """In-memory store that persists every write to a single JSON file."""

    def __init__(self, file_path: Path) -> None:
        super().__init__()
        self.file_path = file_path.resolve()
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._collections = self._load()

    def _load(self) -> dict[str, dict[str, dict[str, object]]]:
        if not self.file_path.exists():
            return {}
        try:
            payload = json.loads(self.file_path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unable to read document store {self.file_path}") from exc
        if not isinstance(payload, dict):
            raise StoreError(f"Document store {self.file_path} is not a JSON object")
        return payload

    def _commit(self, collections: dict[str, dict[str, dict[str, object]]]) -> None:
        # Memory only changes once the file on disk has been replaced.
        document = json.dumps(collections, indent=2, default=_json_default)
        temp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            temp_path.write_text(document, encoding="utf-8")
            temp_path.replace(self.file_path)
        except OSError as exc:
            raise StoreError(f"Unable to write document store {self.file_path}") from exc
        self._collections = collections


def _normalize_path(path: str) -> str:
    segments = [segment for segment in path.strip("/").split("/") if segment]
    # Collections live at odd segment counts: Rooms, Rooms/{id}/Questions, ...
    if not segments or len(segments) % 2 == 0:
        raise StoreError(f"Invalid collection path: {path!r}")
    return "/".join(segments)


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
