"""User-facing texts for the room page."""

PAGE_TITLE: str = "Quiz Rooms"
SEARCH_PLACEHOLDER: str = "Search by Password Simply enter the password"
LOGIN_REQUIRED_MESSAGE: str = "login is required"
UNLOAD_WARNING_MESSAGE: str = (
    "If you refresh the page, your progress will be lost and your marks will be set to zero!"
)
NO_QUESTIONS_MESSAGE: str = "This room has no questions yet."
