"""Tests for the enter-room modal and the join checks."""

from __future__ import annotations

from datetime import datetime

import pytest

from quiz_rooms.core.document_store import participants_path
from quiz_rooms.core.errors import (
    AlreadyJoinedError,
    IncorrectPasswordError,
    MissingFieldsError,
    RoomNotFoundError,
)
from quiz_rooms.core.models import Identity
from quiz_rooms.core.services.join_flow import JoinFlow
from quiz_rooms.core.services.participant_registry import ParticipantRegistry
from quiz_rooms.core.services.room_directory import RoomDirectory


@pytest.fixture
def registry(store):
    return ParticipantRegistry(store)


@pytest.fixture
def join_flow(store, registry, two_question_room):
    directory = RoomDirectory(store)
    directory.refresh()
    flow = JoinFlow(store, directory, registry)
    flow.open_modal(two_question_room)
    return flow


def _fill(flow, name="Alice", password="sum"):
    flow.set_entered_name(name)
    flow.set_entered_password(password)


def test_successful_join_registers_participant_and_loads_questions(
    join_flow, identity, two_question_room, participants_of
):
    _fill(join_flow)
    outcome = join_flow.join(identity)

    assert outcome.room.id == two_question_room
    assert [q.correct_option for q in outcome.questions] == ["2", "1"]
    assert not join_flow.is_modal_open()

    records = participants_of(two_question_room)
    assert len(records) == 1
    assert records[0]["uid"] == identity.uid
    assert records[0]["name"] == "Alice"
    assert records[0]["score"] == 0
    assert isinstance(records[0]["submittedAt"], datetime)


@pytest.mark.parametrize(("name", "password"), [("", "sum"), ("Alice", ""), ("", "")])
def test_missing_fields_are_rejected(join_flow, identity, two_question_room, participants_of, name, password):
    _fill(join_flow, name, password)
    with pytest.raises(MissingFieldsError, match="All fields required"):
        join_flow.join(identity)
    assert join_flow.is_modal_open()
    assert participants_of(two_question_room) == []


def test_wrong_password_keeps_modal_open(join_flow, identity, two_question_room, participants_of):
    _fill(join_flow, password="SUM")
    with pytest.raises(IncorrectPasswordError, match="Incorrect password"):
        join_flow.join(identity)
    assert join_flow.is_modal_open()
    assert participants_of(two_question_room) == []


def test_already_joined_user_is_rejected_and_modal_closes(
    join_flow, identity, two_question_room, participants_of
):
    _fill(join_flow)
    join_flow.join(identity)

    join_flow.open_modal(two_question_room)
    with pytest.raises(AlreadyJoinedError, match="already joined"):
        join_flow.join(identity)
    assert not join_flow.is_modal_open()
    assert len(participants_of(two_question_room)) == 1


def test_membership_check_runs_before_password_check(join_flow, identity, registry, two_question_room):
    registry.register(two_question_room, identity.uid, "Alice")
    _fill(join_flow, password="wrong")
    with pytest.raises(AlreadyJoinedError):
        join_flow.join(identity)


def test_unknown_room_is_rejected(join_flow, identity):
    join_flow.open_modal("no-such-room")
    _fill(join_flow)
    with pytest.raises(RoomNotFoundError):
        join_flow.join(identity)


def test_other_users_can_join_the_same_room(join_flow, identity, two_question_room, participants_of):
    _fill(join_flow)
    join_flow.join(identity)

    other = Identity(uid="user-2", display_name="Bob")
    join_flow.open_modal(two_question_room)
    _fill(join_flow, name="Bob")
    join_flow.join(other)
    assert [record["uid"] for record in participants_of(two_question_room)] == ["user-1", "user-2"]


def test_record_score_updates_existing_participant(registry, two_question_room, participants_of):
    registry.register(two_question_room, "user-1", "Alice")
    assert registry.record_score(two_question_room, "user-1", 2) is True
    assert participants_of(two_question_room)[0]["score"] == 2


def test_record_score_without_participant_writes_nothing(registry, two_question_room, participants_of):
    assert registry.record_score(two_question_room, "ghost", 5) is False
    assert participants_of(two_question_room) == []


def test_malformed_participant_records_do_not_block_joins(
    store, join_flow, registry, identity, two_question_room, participants_of
):
    store.add_document(
        participants_path(two_question_room),
        {"uid": "other", "name": "Eve", "score": "lots", "submittedAt": "not-a-date"},
    )
    _fill(join_flow)
    join_flow.join(identity)
    assert registry.record_score(two_question_room, "user-1", 2) is True

    others = [p for p in registry.get_participants(two_question_room) if p.uid == "other"]
    assert others[0].score == 0
    assert others[0].submitted_at is None
    assert participants_of(two_question_room)[1]["score"] == 2
