"""State machine for one participant's attempt at a room's quiz."""

from __future__ import annotations

from enum import Enum, auto

from quiz_rooms.constants.ui_constants import NO_QUESTIONS_MESSAGE
from quiz_rooms.core.errors import SessionStateError
from quiz_rooms.core.models import Question, QuizResult, ReviewRow, Room
from quiz_rooms.core.services.scoring import build_review, format_time, score_answers

UNANSWERED = ""


class SessionState(Enum):
    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    SUBMITTED = auto()
    CLOSED = auto()


class QuizSession:
    """Tracks the current question, the answers, the countdown and the result.

    ``answers`` always has one slot per question. A slot holds the chosen
    1-based option as a string, or ``""`` while unanswered. Callers are
    expected to serialize access (the room controller holds a lock).
    """

    def __init__(self) -> None:
        self._state = SessionState.NOT_STARTED
        self._room: Room | None = None
        self._questions: list[Question] = []
        self._answers: list[str] = []
        self._current_index: int = 0
        self._remaining_seconds: int = 0
        self._result: QuizResult | None = None
        self._result_visible: bool = False
        self._submission_count: int = 0

    # --- Lifecycle ---

    def start(self, room: Room, questions: list[Question]) -> None:
        self._room = room
        self._questions = list(questions)
        self._answers = [UNANSWERED] * len(self._questions)
        self._current_index = 0
        self._remaining_seconds = max(0, int(room.quiz_duration))
        self._result = None
        self._result_visible = False
        self._submission_count = 0
        self._state = SessionState.IN_PROGRESS

    def submit(self) -> QuizResult:
        """Score the attempt and move to the review/result views.

        Re-submitting after a submission recomputes the same result from the
        unchanged answers.
        """
        if self._state not in (SessionState.IN_PROGRESS, SessionState.SUBMITTED):
            raise SessionStateError("There is no quiz in progress to submit.")
        self._result = score_answers(self._questions, self._answers)
        self._state = SessionState.SUBMITTED
        self._result_visible = True
        self._submission_count += 1
        return self._result

    def close(self) -> None:
        """Leave the quiz and reset local progress."""
        self._state = SessionState.CLOSED
        self._result = None
        self._current_index = 0
        self._answers = [UNANSWERED] * len(self._questions)

    def close_result(self) -> None:
        self._result_visible = False

    # --- Countdown ---

    def tick(self) -> bool:
        """Advance the countdown by one second.

        Returns True when this tick expired the timer and submitted the quiz.
        """
        if self._state is not SessionState.IN_PROGRESS:
            return False
        if self._remaining_seconds > 0:
            self._remaining_seconds -= 1
        if self._remaining_seconds == 0:
            self.submit()
            return True
        return False

    def is_timer_running(self) -> bool:
        return self._state is SessionState.IN_PROGRESS and self._remaining_seconds > 0

    def get_remaining_seconds(self) -> int:
        return self._remaining_seconds

    def get_formatted_time(self) -> str:
        return format_time(self._remaining_seconds)

    # --- Answers and navigation ---

    def select_answer(self, option_number: int) -> None:
        """Overwrite the answer for the current question with a 1-based option."""
        self._require_in_progress()
        question = self._questions[self._current_index]
        if not 1 <= option_number <= len(question.options):
            raise ValueError(
                f"Option must be between 1 and {len(question.options)}, got {option_number}."
            )
        self._answers[self._current_index] = str(option_number)

    def next_question(self) -> int:
        self._require_in_progress()
        if self._current_index < len(self._questions) - 1:
            self._current_index += 1
        return self._current_index

    def previous_question(self) -> int:
        self._require_in_progress()
        if self._current_index > 0:
            self._current_index -= 1
        return self._current_index

    def _require_in_progress(self) -> None:
        if self._state is not SessionState.IN_PROGRESS:
            raise SessionStateError("The quiz is not in progress.")
        if not self._questions:
            raise SessionStateError(NO_QUESTIONS_MESSAGE)

    # --- Queries ---

    def get_state(self) -> SessionState:
        return self._state

    def get_room(self) -> Room | None:
        return self._room

    def get_questions(self) -> list[Question]:
        return list(self._questions)

    def get_answers(self) -> list[str]:
        return list(self._answers)

    def get_current_index(self) -> int:
        return self._current_index

    def get_current_question(self) -> Question | None:
        if 0 <= self._current_index < len(self._questions):
            return self._questions[self._current_index]
        return None

    def get_current_answer(self) -> str:
        if 0 <= self._current_index < len(self._answers):
            return self._answers[self._current_index]
        return UNANSWERED

    def is_last_question(self) -> bool:
        return self._current_index >= len(self._questions) - 1

    def get_result(self) -> QuizResult | None:
        return self._result

    def get_submission_count(self) -> int:
        return self._submission_count

    def review(self) -> list[ReviewRow]:
        if self._state is not SessionState.SUBMITTED:
            return []
        return build_review(self._questions, self._answers)

    def is_quiz_visible(self) -> bool:
        return self._state is SessionState.IN_PROGRESS

    def is_review_visible(self) -> bool:
        return self._state is SessionState.SUBMITTED

    def is_result_visible(self) -> bool:
        return self._result_visible and self._result is not None

    def needs_unload_warning(self) -> bool:
        """True while a started attempt has not been submitted."""
        return self._state is SessionState.IN_PROGRESS
