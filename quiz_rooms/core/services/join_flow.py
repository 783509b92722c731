"""Service for the enter-room modal and the password join."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from quiz_rooms.core.document_store import DocumentStore, questions_path
from quiz_rooms.core.errors import (
    AlreadyJoinedError,
    IncorrectPasswordError,
    MissingFieldsError,
    RoomNotFoundError,
)
from quiz_rooms.core.models import Identity, Participant, Question, Room
from quiz_rooms.core.services.participant_registry import ParticipantRegistry
from quiz_rooms.core.services.room_directory import RoomDirectory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JoinOutcome:
    """What a successful join hands to the quiz session."""

    room: Room
    participant: Participant
    questions: list[Question]


class JoinFlow:
    """Holds the modal's form state and performs the join checks in order."""

    def __init__(
        self,
        store: DocumentStore,
        directory: RoomDirectory,
        participants: ParticipantRegistry,
    ) -> None:
        self._store = store
        self._directory = directory
        self._participants = participants
        self._modal_open: bool = False
        self._room_id: str | None = None
        self._entered_name: str = ""
        self._entered_password: str = ""

    def open_modal(self, room_id: str) -> None:
        self._modal_open = True
        self._room_id = room_id

    def close_modal(self) -> None:
        self._modal_open = False

    def is_modal_open(self) -> bool:
        return self._modal_open

    def set_entered_name(self, name: str) -> None:
        self._entered_name = name

    def set_entered_password(self, password: str) -> None:
        self._entered_password = password

    def join(self, identity: Identity) -> JoinOutcome:
        """Validate the form, check membership and password, then register.

        Raises a ``JoinError`` subclass for every rejected attempt. An
        already-joined user also gets the modal closed; a wrong password
        leaves it open for another try.
        """
        room = self._directory.find(self._room_id)
        if room is None:
            raise RoomNotFoundError(f"Room {self._room_id!r} is not available.")

        if not self._entered_name or not self._entered_password:
            raise MissingFieldsError()

        if self._participants.has_joined(room.id, identity.uid):
            logger.info("Rejected join for %s: already in room %s", identity.uid, room.id)
            self._modal_open = False
            raise AlreadyJoinedError()

        if room.password != self._entered_password:
            logger.info("Rejected join for %s: wrong password for room %s", identity.uid, room.id)
            raise IncorrectPasswordError()

        participant = self._participants.register(room.id, identity.uid, self._entered_name)
        questions = self._load_questions(room.id)
        self._modal_open = False
        return JoinOutcome(room=room, participant=participant, questions=questions)

    def _load_questions(self, room_id: str) -> list[Question]:
        documents = self._store.get_documents(questions_path(room_id))
        return [Question.from_document(doc.id, doc.data) for doc in documents]
