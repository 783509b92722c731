"""Service for reading and writing a room's participant records."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from quiz_rooms.core.document_store import DocumentStore, participants_path
from quiz_rooms.core.models import Participant

logger = logging.getLogger(__name__)


class ParticipantRegistry:
    """Scans and updates ``Rooms/{roomId}/Participants``.

    Lookups are full collection scans matched on ``uid``; nothing here is
    transactional, so a check followed by a write can race with another
    client doing the same.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def get_participants(self, room_id: str) -> list[Participant]:
        documents = self._store.get_documents(participants_path(room_id))
        return [Participant.from_document(doc.id, doc.data) for doc in documents]

    def find_participant(self, room_id: str, uid: str) -> Participant | None:
        return next((p for p in self.get_participants(room_id) if p.uid == uid), None)

    def has_joined(self, room_id: str, uid: str) -> bool:
        return self.find_participant(room_id, uid) is not None

    def register(self, room_id: str, uid: str, name: str) -> Participant:
        joined_at = datetime.now(timezone.utc)
        doc_id = self._store.add_document(
            participants_path(room_id),
            {"uid": uid, "name": name, "score": 0, "submittedAt": joined_at},
        )
        logger.info("Participant %s (%s) joined room %s", name, uid, room_id)
        return Participant(id=doc_id, uid=uid, name=name, score=0, submitted_at=joined_at)

    def record_score(self, room_id: str, uid: str, score: int) -> bool:
        """Write ``score`` onto the caller's record; False when it is not found yet."""
        participant = self.find_participant(room_id, uid)
        if participant is None:
            logger.warning("No participant record for %s in room %s; score %d not saved", uid, room_id, score)
            return False
        self._store.update_document(participants_path(room_id), participant.id, {"score": score})
        logger.info("Saved score %d for %s in room %s", score, uid, room_id)
        return True
