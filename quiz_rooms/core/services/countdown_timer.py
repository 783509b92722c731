"""Repeating background timer that drives a quiz countdown."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Event, Lock, Thread

from quiz_rooms.constants.quiz_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Calls ``on_tick`` every ``interval`` seconds until told to stop.

    ``on_tick`` returns True to keep ticking and False to tear the timer
    down, so the owner decides when its condition (quiz visible, time left)
    no longer holds.
    """

    def __init__(self, on_tick: Callable[[], bool], interval: float = TICK_INTERVAL_SECONDS) -> None:
        if interval <= 0:
            raise ValueError("Tick interval must be positive.")
        self._on_tick = on_tick
        self._interval = interval
        self._lock = Lock()
        self._stop_event: Event | None = None
        self._thread: Thread | None = None

    def start(self) -> None:
        with self._lock:
            self._stop_locked()
            stop_event = Event()
            thread = Thread(
                target=self._run,
                args=(stop_event,),
                name="QuizCountdown",
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
        thread.start()

    def stop(self) -> None:
        with self._lock:
            self._stop_locked()

    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def _stop_locked(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        self._stop_event = None
        self._thread = None

    def _run(self, stop_event: Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                keep_running = self._on_tick()
            except Exception:
                logger.exception("Countdown tick failed; stopping timer")
                stop_event.set()
                return
            if not keep_running:
                stop_event.set()
