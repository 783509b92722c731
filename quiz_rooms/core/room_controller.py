"""Business logic for one user's view of the room page."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock

from quiz_rooms.constants.quiz_constants import TICK_INTERVAL_SECONDS
from quiz_rooms.core.document_store import DocumentStore
from quiz_rooms.core.models import Identity, Question, QuizResult, ReviewRow, Room, RoomSummary
from quiz_rooms.core.services.countdown_timer import CountdownTimer
from quiz_rooms.core.services.join_flow import JoinFlow, JoinOutcome
from quiz_rooms.core.services.participant_registry import ParticipantRegistry
from quiz_rooms.core.services.quiz_session import QuizSession, SessionState
from quiz_rooms.core.services.room_directory import RoomDirectory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuizSnapshot:
    """Read-only copy of the session state for rendering."""

    state: SessionState
    room: Room | None
    question: Question | None
    current_index: int
    question_count: int
    current_answer: str
    remaining_seconds: int
    formatted_time: str
    is_last_question: bool
    quiz_visible: bool
    review_visible: bool
    result_visible: bool
    needs_unload_warning: bool


class RoomController:
    """Facade over directory, join flow, quiz session and countdown for one identity."""

    def __init__(
        self,
        store: DocumentStore,
        identity: Identity,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self._lock = Lock()
        self._identity = identity

        # Services
        self._directory = RoomDirectory(store)
        self._participants = ParticipantRegistry(store)
        self._join_flow = JoinFlow(store, self._directory, self._participants)
        self._session = QuizSession()
        self._tick_interval = tick_interval
        self._timer: CountdownTimer | None = None
        self._timer_generation: int = 0

    # --- Room Directory Delegation ---

    def refresh_rooms(self) -> list[RoomSummary]:
        with self._lock:
            self._directory.refresh()
            return self._directory.get_summaries()

    def search_rooms(self, text: str) -> list[RoomSummary]:
        with self._lock:
            self._directory.search(text)
            return self._directory.get_summaries()

    def get_search_text(self) -> str:
        with self._lock:
            return self._directory.get_search_text()

    # --- Join Flow Delegation ---

    def open_join_modal(self, room_id: str) -> None:
        with self._lock:
            self._join_flow.open_modal(room_id)

    def close_join_modal(self) -> None:
        with self._lock:
            self._join_flow.close_modal()

    def is_join_modal_open(self) -> bool:
        with self._lock:
            return self._join_flow.is_modal_open()

    def set_join_form(self, name: str, password: str) -> None:
        with self._lock:
            self._join_flow.set_entered_name(name)
            self._join_flow.set_entered_password(password)

    def join(self) -> JoinOutcome:
        """Run the join checks and, on success, start a fresh quiz session."""
        with self._lock:
            outcome = self._join_flow.join(self._identity)
            self._stop_timer_locked()
            self._session.start(outcome.room, outcome.questions)
            self._start_timer_locked()
            logger.info(
                "Quiz started in room %s for %s: %d question(s), %s on the clock",
                outcome.room.id,
                self._identity.uid,
                len(outcome.questions),
                self._session.get_formatted_time(),
            )
            return outcome

    # --- Quiz Session Delegation ---

    def select_answer(self, option_number: int) -> list[str]:
        with self._lock:
            self._session.select_answer(option_number)
            return self._session.get_answers()

    def next_question(self) -> int:
        with self._lock:
            return self._session.next_question()

    def previous_question(self) -> int:
        with self._lock:
            return self._session.previous_question()

    def submit_quiz(self) -> QuizResult:
        with self._lock:
            result = self._session.submit()
            self._stop_timer_locked()
            self._persist_score_locked(result)
            return result

    def close_quiz(self) -> None:
        with self._lock:
            self._stop_timer_locked()
            self._session.close()

    def close_result(self) -> None:
        with self._lock:
            self._session.close_result()

    def tick(self) -> bool:
        """Advance the countdown once; True when this tick auto-submitted."""
        with self._lock:
            return self._tick_locked()

    def get_result(self) -> QuizResult | None:
        with self._lock:
            return self._session.get_result()

    def is_result_visible(self) -> bool:
        with self._lock:
            return self._session.is_result_visible()

    def get_answers(self) -> list[str]:
        with self._lock:
            return self._session.get_answers()

    def get_review(self) -> list[ReviewRow]:
        with self._lock:
            return self._session.review()

    def get_quiz_snapshot(self) -> QuizSnapshot:
        with self._lock:
            session = self._session
            return QuizSnapshot(
                state=session.get_state(),
                room=session.get_room(),
                question=session.get_current_question(),
                current_index=session.get_current_index(),
                question_count=len(session.get_questions()),
                current_answer=session.get_current_answer(),
                remaining_seconds=session.get_remaining_seconds(),
                formatted_time=session.get_formatted_time(),
                is_last_question=session.is_last_question(),
                quiz_visible=session.is_quiz_visible(),
                review_visible=session.is_review_visible(),
                result_visible=session.is_result_visible(),
                needs_unload_warning=session.needs_unload_warning(),
            )

    def is_timer_running(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_running()

    def shutdown(self) -> None:
        with self._lock:
            self._stop_timer_locked()

    # --- Internals ---

    def _tick_locked(self) -> bool:
        expired = self._session.tick()
        if expired:
            result = self._session.get_result()
            logger.info("Time is up in room %s for %s", self._current_room_id(), self._identity.uid)
            self._stop_timer_locked()
            if result is not None:
                self._persist_score_locked(result)
        return expired

    def _on_timer_tick(self, generation: int) -> bool:
        with self._lock:
            # A timer from a previous attempt may still be waiting on the lock.
            if generation != self._timer_generation:
                return False
            self._tick_locked()
            return self._session.get_state() is SessionState.IN_PROGRESS

    def _start_timer_locked(self) -> None:
        self._timer_generation += 1
        generation = self._timer_generation
        self._timer = CountdownTimer(lambda: self._on_timer_tick(generation), self._tick_interval)
        self._timer.start()

    def _stop_timer_locked(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self._timer_generation += 1

    def _persist_score_locked(self, result: QuizResult) -> None:
        room_id = self._current_room_id()
        if room_id is None:
            return
        logger.info(
            "Submitted room %s for %s: %d correct, %d incorrect (%s)",
            room_id,
            self._identity.uid,
            result.correct,
            result.incorrect,
            result.format_percentage(),
        )
        self._participants.record_score(room_id, self._identity.uid, result.correct)

    def _current_room_id(self) -> str | None:
        room = self._session.get_room()
        return room.id if room is not None else None


class RoomControllerRegistry:
    """Creates one controller per identity, lazily."""

    def __init__(self, store: DocumentStore, tick_interval: float = TICK_INTERVAL_SECONDS) -> None:
        self._store = store
        self._tick_interval = tick_interval
        self._lock = Lock()
        self._controllers: dict[str, RoomController] = {}

    def get(self, identity: Identity) -> RoomController:
        with self._lock:
            controller = self._controllers.get(identity.uid)
            if controller is None:
                controller = RoomController(self._store, identity, self._tick_interval)
                self._controllers[identity.uid] = controller
            return controller

    def __len__(self) -> int:
        with self._lock:
            return len(self._controllers)

    def discard(self, uid: str) -> None:
        with self._lock:
            controller = self._controllers.pop(uid, None)
        if controller is not None:
            controller.shutdown()

    def shutdown(self) -> None:
        with self._lock:
            controllers = list(self._controllers.values())
            self._controllers.clear()
        logger.info("Stopping %d room controller(s)", len(controllers))
        for controller in controllers:
            controller.shutdown()
