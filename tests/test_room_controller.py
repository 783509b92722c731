"""Tests for the per-user room controller: join, answer, submit, countdown."""

from __future__ import annotations

import time

import pytest

from quiz_rooms.core.errors import AlreadyJoinedError, IncorrectPasswordError
from quiz_rooms.core.models import Identity
from quiz_rooms.core.room_controller import RoomController, RoomControllerRegistry
from quiz_rooms.core.services.countdown_timer import CountdownTimer
from quiz_rooms.core.services.quiz_session import SessionState

# Long enough that no background tick fires while a test runs.
IDLE_INTERVAL = 3600.0


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def controller(store, identity):
    controller = RoomController(store, identity, tick_interval=IDLE_INTERVAL)
    yield controller
    controller.shutdown()


def _join(controller, room_id, name="Alice", password="sum"):
    controller.refresh_rooms()
    controller.open_join_modal(room_id)
    controller.set_join_form(name, password)
    return controller.join()


def test_join_starts_quiz_and_timer(controller, two_question_room):
    _join(controller, two_question_room)
    snapshot = controller.get_quiz_snapshot()
    assert snapshot.state is SessionState.IN_PROGRESS
    assert snapshot.quiz_visible
    assert snapshot.question_count == 2
    assert snapshot.remaining_seconds == 60
    assert snapshot.formatted_time == "1:00"
    assert snapshot.needs_unload_warning
    assert not controller.is_join_modal_open()
    assert controller.is_timer_running()


def test_full_attempt_scores_and_persists(controller, two_question_room, participants_of):
    _join(controller, two_question_room)
    controller.select_answer(2)
    controller.next_question()
    controller.select_answer(1)

    result = controller.submit_quiz()

    assert (result.correct, result.incorrect) == (2, 0)
    assert result.format_percentage() == "100.00%"
    assert participants_of(two_question_room)[0]["score"] == 2
    assert not controller.is_timer_running()
    assert controller.is_result_visible()
    assert [row.your_answer for row in controller.get_review()] == ["Option 2", "Option 1"]


def test_unanswered_question_is_incorrect(controller, two_question_room, participants_of):
    _join(controller, two_question_room)
    controller.select_answer(1)
    result = controller.submit_quiz()
    assert (result.correct, result.incorrect) == (0, 2)
    assert participants_of(two_question_room)[0]["score"] == 0


def test_expiry_auto_submits_once_and_persists(store, identity, add_room, participants_of):
    room_id = add_room(
        password="pw",
        duration=2,
        questions=[("Pick two", ["one", "two"], "2")],
    )
    controller = RoomController(store, identity, tick_interval=IDLE_INTERVAL)
    try:
        _join(controller, room_id, password="pw")
        controller.select_answer(2)

        assert controller.tick() is False
        assert controller.tick() is True
        assert controller.tick() is False

        assert controller.get_quiz_snapshot().state is SessionState.SUBMITTED
        assert controller.get_result().correct == 1
        assert participants_of(room_id)[0]["score"] == 1
        assert not controller.is_timer_running()
    finally:
        controller.shutdown()


def test_background_timer_expires_quiz(store, identity, add_room, participants_of):
    room_id = add_room(password="pw", duration=2, questions=[("Pick one", ["one", "two"], "1")])
    controller = RoomController(store, identity, tick_interval=0.01)
    try:
        _join(controller, room_id, password="pw")
        controller.select_answer(1)
        assert _wait_for(lambda: controller.get_quiz_snapshot().state is SessionState.SUBMITTED)
        assert controller.get_quiz_snapshot().remaining_seconds == 0
        assert _wait_for(lambda: participants_of(room_id)[0]["score"] == 1)
        assert _wait_for(lambda: not controller.is_timer_running())
    finally:
        controller.shutdown()


def test_close_quiz_stops_timer_and_resets(controller, two_question_room):
    _join(controller, two_question_room)
    controller.select_answer(3)
    controller.close_quiz()
    snapshot = controller.get_quiz_snapshot()
    assert snapshot.state is SessionState.CLOSED
    assert not snapshot.quiz_visible
    assert not snapshot.needs_unload_warning
    assert controller.get_answers() == ["", ""]
    assert not controller.is_timer_running()


def test_second_join_of_same_room_is_rejected(controller, two_question_room, participants_of):
    _join(controller, two_question_room)
    controller.submit_quiz()
    controller.close_quiz()

    controller.open_join_modal(two_question_room)
    with pytest.raises(AlreadyJoinedError):
        controller.join()
    assert not controller.is_join_modal_open()
    assert len(participants_of(two_question_room)) == 1


def test_wrong_password_leaves_session_untouched(controller, two_question_room):
    with pytest.raises(IncorrectPasswordError):
        _join(controller, two_question_room, password="nope")
    assert controller.is_join_modal_open()
    assert controller.get_quiz_snapshot().state is SessionState.NOT_STARTED
    assert not controller.is_timer_running()


def test_search_through_controller(controller, add_room):
    add_room(subject="Physics", password="alpha")
    add_room(subject="Chemistry", password="beta")
    controller.refresh_rooms()
    assert [s.subject for s in controller.search_rooms("bet")] == ["Chemistry"]
    assert controller.get_search_text() == "bet"
    assert [s.subject for s in controller.search_rooms("none")] == ["Physics", "Chemistry"]


def test_registry_returns_one_controller_per_identity(store):
    registry = RoomControllerRegistry(store, tick_interval=IDLE_INTERVAL)
    alice = Identity(uid="a")
    first = registry.get(alice)
    assert registry.get(Identity(uid="a")) is first
    assert registry.get(Identity(uid="b")) is not first
    registry.shutdown()


def test_countdown_timer_stops_when_callback_returns_false():
    calls = []

    def on_tick():
        calls.append(1)
        return len(calls) < 3

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    assert _wait_for(lambda: len(calls) == 3)
    assert _wait_for(lambda: not timer.is_running())
    time.sleep(0.05)
    assert len(calls) == 3


def test_countdown_timer_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        CountdownTimer(lambda: True, interval=0)
