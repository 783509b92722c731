"""Utilities for seeding rooms from a human-friendly text file.

File format (blocks separated by blank lines or '---'):

    ROOM: Subject shown in the room list
    OWNER: Owner name
    PASSWORD: plaintext room password
    DURATION: quiz duration in seconds

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    ...            (two to eight options, lettered A-H in order)
    CORRECT: letter of the correct option (optional)

A ``ROOM:`` block opens a new room; every following ``Q:`` block belongs to
it until the next ``ROOM:`` block. Correct options are stored the way the
room page compares them: as the 1-based option position in text form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from quiz_rooms.constants.quiz_constants import MIN_OPTION_COUNT, ROOM_OPTION_LETTERS
from quiz_rooms.core.document_store import ROOMS_COLLECTION, DocumentStore, questions_path
from quiz_rooms.core.errors import RoomImportError
from quiz_rooms.core.models import Question, Room

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportedRoom:
    """A room definition with its questions, before it receives a store id."""

    room: Room
    questions: list[Question] = field(default_factory=list)


def load_rooms_from_file(file_path: Path) -> list[ImportedRoom]:
    text = file_path.read_text(encoding="utf-8")
    rooms = parse_rooms_text(text)
    if not rooms:
        raise RoomImportError("Room file did not contain any rooms.")
    return rooms


def parse_rooms_text(text: str) -> list[ImportedRoom]:
    rooms: list[ImportedRoom] = []
    for block in _split_blocks(text):
        first_line = block.splitlines()[0].strip().upper()
        if first_line.startswith("ROOM:"):
            rooms.append(ImportedRoom(room=_parse_room_block(block)))
        elif first_line.startswith("Q:"):
            if not rooms:
                raise RoomImportError("Question found before any ROOM: block.")
            rooms[-1].questions.append(_parse_question_block(block))
        else:
            raise RoomImportError(f"Block must start with ROOM: or Q:, got '{block.splitlines()[0]}'.")
    return rooms


def seed_store(store: DocumentStore, rooms: list[ImportedRoom]) -> list[str]:
    """Write rooms and their questions into ``store``; returns the new room ids."""
    room_ids: list[str] = []
    for imported in rooms:
        room_id = store.add_document(ROOMS_COLLECTION, imported.room.to_document())
        for question in imported.questions:
            store.add_document(questions_path(room_id), question.to_document())
        imported.room.id = room_id
        room_ids.append(room_id)
        logger.info(
            "Seeded room %s (%s) with %d question(s)",
            room_id,
            imported.room.subject,
            len(imported.questions),
        )
    return room_ids


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_room_block(block: str) -> Room:
    values: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        if ":" not in line:
            raise RoomImportError(f"Expected KEY: value in room block, got '{line}'.")
        key, value = line.split(":", 1)
        values[key.strip().upper()] = value.strip()

    unknown = set(values) - {"ROOM", "OWNER", "PASSWORD", "DURATION"}
    if unknown:
        raise RoomImportError(f"Unknown room field(s): {', '.join(sorted(unknown))}.")
    if not values.get("ROOM"):
        raise RoomImportError("Room subject cannot be empty.")
    if not values.get("PASSWORD"):
        raise RoomImportError("Room password cannot be empty.")

    raw_duration = values.get("DURATION", "")
    try:
        duration = int(raw_duration)
    except ValueError as exc:
        raise RoomImportError("DURATION must be an integer number of seconds.") from exc
    if duration <= 0:
        raise RoomImportError("DURATION must be a positive integer.")

    return Room(
        id="",
        subject=values["ROOM"],
        owner_name=values.get("OWNER", ""),
        password=values["PASSWORD"],
        quiz_duration=duration,
    )


def _parse_question_block(block: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in ROOM_OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in ROOM_OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise RoomImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise RoomImportError("Question text cannot be empty.")

    expected_letters = list(ROOM_OPTION_LETTERS[: len(options)])
    if sorted(options) != expected_letters:
        raise RoomImportError("Options must be lettered consecutively starting at A.")
    if len(options) < MIN_OPTION_COUNT:
        raise RoomImportError(f"Each question needs at least {MIN_OPTION_COUNT} options.")

    option_list = [options[letter].strip() for letter in expected_letters]
    if any(not option for option in option_list):
        raise RoomImportError("Option text cannot be empty.")

    correct_option = ""
    if correct_letter is not None:
        if correct_letter not in expected_letters:
            raise RoomImportError(f"CORRECT must be one of {', '.join(expected_letters)}.")
        correct_option = str(expected_letters.index(correct_letter) + 1)

    return Question(
        id="",
        question_text=question_text,
        options=option_list,
        correct_option=correct_option,
    )
