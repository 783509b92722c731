"""Quiz-related constants shared across the core and server layers."""

TICK_INTERVAL_SECONDS: float = 1.0
ROOM_OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D", "E", "F", "G", "H")
MIN_OPTION_COUNT: int = 2
