"""Network configuration constants for the quiz room application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
IDENTITY_COOKIE: str = "quizrooms_uid"
IDENTITY_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 30
