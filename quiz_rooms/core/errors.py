"""Exception hierarchy shared by the quiz room services and the API layer."""

from __future__ import annotations

from quiz_rooms.constants.ui_constants import LOGIN_REQUIRED_MESSAGE


class QuizRoomsError(Exception):
    """Base exception for the quiz room application."""


class LoginRequiredError(QuizRoomsError):
    """Raised when an operation needs an identity and none is available."""

    def __init__(self, message: str = LOGIN_REQUIRED_MESSAGE) -> None:
        super().__init__(message)


class StoreError(QuizRoomsError):
    """Raised when the document store cannot complete a read or write."""


class DocumentNotFoundError(StoreError):
    """Raised when an update targets a document id that does not exist."""


class RoomImportError(QuizRoomsError):
    """Raised when a room definition file cannot be parsed."""


class JoinError(QuizRoomsError):
    """Base class for business conditions that reject a room join."""


class RoomNotFoundError(JoinError):
    """Raised when the selected room is not in the directory."""


class MissingFieldsError(JoinError):
    def __init__(self, message: str = "All fields required") -> None:
        super().__init__(message)


class AlreadyJoinedError(JoinError):
    def __init__(self, message: str = "You have already joined this room.") -> None:
        super().__init__(message)


class IncorrectPasswordError(JoinError):
    def __init__(self, message: str = "Incorrect password. Please try again.") -> None:
        super().__init__(message)


class SessionStateError(QuizRoomsError):
    """Raised when a quiz action is not valid in the session's current state."""
