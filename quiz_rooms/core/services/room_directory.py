"""Service that mirrors the room collection and filters it for display."""

from __future__ import annotations

import logging

from quiz_rooms.core.document_store import ROOMS_COLLECTION, DocumentStore
from quiz_rooms.core.models import Room, RoomSummary

logger = logging.getLogger(__name__)


class RoomDirectory:
    """Keeps an unfiltered and a filtered copy of the room list."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._rooms: list[Room] = []
        self._filtered: list[Room] = []
        self._search_text: str = ""

    def refresh(self) -> list[Room]:
        """Re-read every room and re-apply the current search.

        A failed read propagates and leaves both lists untouched.
        """
        documents = self._store.get_documents(ROOMS_COLLECTION)
        self._rooms = [Room.from_document(doc.id, doc.data) for doc in documents]
        self._filtered = self._apply_filter(self._search_text)
        logger.debug("Loaded %d room(s)", len(self._rooms))
        return list(self._rooms)

    def search(self, text: str) -> list[Room]:
        """Filter rooms whose password contains ``text``.

        When nothing matches, the full list is shown instead, so an empty or
        unmatched search displays every room.
        """
        self._search_text = text
        self._filtered = self._apply_filter(text)
        return list(self._filtered)

    def _apply_filter(self, text: str) -> list[Room]:
        matches = [room for room in self._rooms if text in room.password]
        return matches if matches else list(self._rooms)

    def get_rooms(self) -> list[Room]:
        return list(self._rooms)

    def get_filtered_rooms(self) -> list[Room]:
        return list(self._filtered)

    def get_summaries(self) -> list[RoomSummary]:
        return [
            RoomSummary(
                id=room.id,
                subject=room.subject,
                owner_name=room.owner_name,
                quiz_duration=room.quiz_duration,
            )
            for room in self._filtered
        ]

    def get_search_text(self) -> str:
        return self._search_text

    def find(self, room_id: str | None) -> Room | None:
        if room_id is None:
            return None
        return next((room for room in self._rooms if room.id == room_id), None)
