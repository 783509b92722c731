"""Tests for the room directory listing and password search."""

from __future__ import annotations

import pytest

from quiz_rooms.core.document_store import ROOMS_COLLECTION, DocumentStore
from quiz_rooms.core.errors import StoreError
from quiz_rooms.core.services.room_directory import RoomDirectory


class FailingStore(DocumentStore):
    def get_documents(self, path):
        raise StoreError("backend unavailable")

    def add_document(self, path, data):
        raise StoreError("backend unavailable")

    def update_document(self, path, doc_id, fields):
        raise StoreError("backend unavailable")


@pytest.fixture
def directory(store, add_room):
    add_room(subject="Physics", password="alpha123")
    add_room(subject="Chemistry", password="beta456")
    add_room(subject="Biology", password="Alpha789")
    directory = RoomDirectory(store)
    directory.refresh()
    return directory


def _subjects(rooms):
    return [room.subject for room in rooms]


def test_refresh_mirrors_all_rooms(directory):
    assert _subjects(directory.get_rooms()) == ["Physics", "Chemistry", "Biology"]
    assert _subjects(directory.get_filtered_rooms()) == ["Physics", "Chemistry", "Biology"]


def test_search_matches_password_substring(directory):
    assert _subjects(directory.search("123")) == ["Physics"]
    assert _subjects(directory.search("a")) == ["Physics", "Chemistry", "Biology"]


def test_search_is_case_sensitive(directory):
    assert _subjects(directory.search("Alpha")) == ["Biology"]
    assert _subjects(directory.search("alpha")) == ["Physics"]


def test_no_match_falls_back_to_full_list(directory):
    assert _subjects(directory.search("zzz")) == ["Physics", "Chemistry", "Biology"]


def test_empty_search_shows_everything(directory):
    assert len(directory.search("")) == 3


@pytest.mark.parametrize("text", ["1", "45", "beta", "9", "nothing", ""])
def test_filter_property(directory, text):
    rooms = directory.get_rooms()
    expected = [room for room in rooms if text in room.password] or rooms
    assert directory.search(text) == expected


def test_refresh_reapplies_current_search(directory, store, add_room):
    directory.search("beta")
    add_room(subject="Geology", password="beta000")
    directory.refresh()
    assert _subjects(directory.get_filtered_rooms()) == ["Chemistry", "Geology"]


def test_summaries_hide_passwords(directory):
    summaries = directory.get_summaries()
    assert [summary.subject for summary in summaries] == ["Physics", "Chemistry", "Biology"]
    assert not any(hasattr(summary, "password") for summary in summaries)


def test_find_returns_mirrored_room(directory):
    room = directory.get_rooms()[1]
    assert directory.find(room.id) == room
    assert directory.find("missing") is None
    assert directory.find(None) is None


def test_failed_refresh_propagates_and_leaves_list_empty():
    directory = RoomDirectory(FailingStore())
    with pytest.raises(StoreError):
        directory.refresh()
    assert directory.get_rooms() == []
    assert directory.get_filtered_rooms() == []


def test_room_with_unreadable_duration_still_lists(store, add_room):
    add_room(subject="Physics", duration=60)
    store.add_document(ROOMS_COLLECTION, {"roomSubject": "Broken", "quizDuration": "ten"})
    directory = RoomDirectory(store)
    directory.refresh()
    assert _subjects(directory.get_rooms()) == ["Physics", "Broken"]
    assert [room.quiz_duration for room in directory.get_rooms()] == [60, 0]
