"""Scoring helpers for submitted quiz attempts."""

from __future__ import annotations

from quiz_rooms.core.models import Question, QuizResult, ReviewRow

NOT_ANSWERED = "Not answered"
NOT_AVAILABLE = "N/A"


def score_answers(questions: list[Question], answers: list[str]) -> QuizResult:
    """Count answers that equal the question's correct option string.

    An unanswered slot is ``""`` and never equals a correct option, so it is
    counted as incorrect along with every wrong choice.
    """
    correct = sum(
        1
        for index, question in enumerate(questions)
        if index < len(answers) and question.correct_option == answers[index]
    )
    return QuizResult(correct=correct, incorrect=len(questions) - correct)


def build_review(questions: list[Question], answers: list[str]) -> list[ReviewRow]:
    rows: list[ReviewRow] = []
    for index, question in enumerate(questions):
        answer = answers[index] if index < len(answers) else ""
        rows.append(
            ReviewRow(
                question_text=question.question_text,
                your_answer=f"Option {answer}" if answer else NOT_ANSWERED,
                correct_answer=f"Option {question.correct_option}" if question.correct_option else NOT_AVAILABLE,
            )
        )
    return rows


def format_time(seconds: int) -> str:
    """Render a countdown as ``M:SS``."""
    seconds = max(0, int(seconds))
    minutes, remainder = divmod(seconds, 60)
    return f"{minutes}:{remainder:02d}"
