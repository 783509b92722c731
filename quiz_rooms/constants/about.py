"""Static metadata describing QuizRooms."""

APP_NAME = "QuizRooms"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "QuizRooms lists password-protected quiz rooms, lets a signed-in user join one, "
    "runs a timed multiple-choice attempt and stores the score."
)
