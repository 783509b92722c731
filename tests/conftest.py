"""Shared fixtures for the quiz room tests."""

from __future__ import annotations

import pytest

from quiz_rooms.core.document_store import (
    ROOMS_COLLECTION,
    InMemoryDocumentStore,
    participants_path,
    questions_path,
)
from quiz_rooms.core.models import Identity


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def add_room(store):
    """Insert a room with questions given as (prompt, options, correct) tuples."""

    def _add_room(subject="Physics", owner="Ada", password="secret", duration=60, questions=()):
        room_id = store.add_document(
            ROOMS_COLLECTION,
            {"roomSubject": subject, "ownerName": owner, "password": password, "quizDuration": duration},
        )
        for prompt, options, correct in questions:
            store.add_document(
                questions_path(room_id),
                {"question": prompt, "options": list(options), "correctOption": correct},
            )
        return room_id

    return _add_room


@pytest.fixture
def two_question_room(add_room):
    """Room with a 60 second timer and correct options "2" then "1"."""
    return add_room(
        subject="Arithmetic",
        password="sum",
        duration=60,
        questions=[
            ("What is 1 + 1?", ["1", "2", "3"], "2"),
            ("What is 2 - 1?", ["1", "2", "3"], "1"),
        ],
    )


@pytest.fixture
def identity():
    return Identity(uid="user-1", display_name="Alice")


@pytest.fixture
def participants_of(store):
    def _participants_of(room_id):
        return [doc.data for doc in store.get_documents(participants_path(room_id))]

    return _participants_of
