"""Utilities for exporting rooms to the plain-text format used for seeding."""

from __future__ import annotations

from pathlib import Path

from quiz_rooms.constants.quiz_constants import ROOM_OPTION_LETTERS
from quiz_rooms.core.document_store import ROOMS_COLLECTION, DocumentStore, questions_path
from quiz_rooms.core.models import Question, Room
from quiz_rooms.core.room_importer import ImportedRoom


def save_rooms_to_file(file_path: Path, rooms: list[ImportedRoom]) -> None:
    """Persist the provided rooms to disk in the seeding format."""

    if not rooms:
        raise ValueError("Cannot export an empty room list.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_rooms(rooms), encoding="utf-8")


def collect_rooms(store: DocumentStore) -> list[ImportedRoom]:
    """Read every room and its questions back out of ``store``."""
    rooms: list[ImportedRoom] = []
    for document in store.get_documents(ROOMS_COLLECTION):
        questions = [
            Question.from_document(doc.id, doc.data)
            for doc in store.get_documents(questions_path(document.id))
        ]
        rooms.append(ImportedRoom(room=Room.from_document(document.id, document.data), questions=questions))
    return rooms


def serialize_rooms(rooms: list[ImportedRoom]) -> str:
    blocks: list[str] = []
    for imported in rooms:
        blocks.append(_serialize_room(imported))
        blocks.extend(_serialize_question(question) for question in imported.questions)
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_room(imported: ImportedRoom) -> str:
    room = imported.room
    return "\n".join(
        [
            f"ROOM: {room.subject}",
            f"OWNER: {room.owner_name}",
            f"PASSWORD: {room.password}",
            f"DURATION: {room.quiz_duration}",
        ]
    )


def _serialize_question(question: Question) -> str:
    if len(question.options) > len(ROOM_OPTION_LETTERS):
        raise ValueError(f"Questions support at most {len(ROOM_OPTION_LETTERS)} options.")

    question_lines = question.question_text.splitlines() or [question.question_text]
    lines = [f"Q: {question_lines[0]}"]
    lines.extend(question_lines[1:])

    for letter, option_text in zip(ROOM_OPTION_LETTERS, question.options):
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    if question.correct_option:
        position = _correct_position(question)
        lines.append(f"CORRECT: {ROOM_OPTION_LETTERS[position - 1]}")

    return "\n".join(lines)


def _correct_position(question: Question) -> int:
    try:
        position = int(question.correct_option)
    except ValueError as exc:
        raise ValueError(
            f"Correct option {question.correct_option!r} of question {question.id!r} is not a number."
        ) from exc
    if not 1 <= position <= len(question.options):
        raise ValueError(
            f"Correct option {position} of question {question.id!r} is outside 1..{len(question.options)}."
        )
    return position
