"""Three-digit page entry: keystrokes in, page-change events out."""

from __future__ import annotations

import threading
from typing import Any, Callable

from teletext_renderer.formatter import format_buffer

from .logging_setup import get_logger
from .models import KeyClass, PageChangeEvent

BUFFER_LENGTH = 3

PageChangeListener = Callable[[PageChangeEvent], None]


def classify_key(raw_key: Any) -> KeyClass:
    if isinstance(raw_key, str) and len(raw_key) == 1 and "0" <= raw_key <= "9":
        return KeyClass.DIGIT
    return KeyClass.IGNORED


class NavigationStateMachine:
    """Owns the digit buffer and the current page.

    The third digit resolves synchronously: the page update, buffer reset and
    event happen in one locked step, so a full buffer is never observable.
    """

    def __init__(self, initial_page: int = 100, on_page_change: PageChangeListener | None = None) -> None:
        self._current_page = int(initial_page)
        self._buffer = ""
        self._lock = threading.RLock()
        self._listeners: list[PageChangeListener] = []
        self._logger = get_logger("navigation")
        if on_page_change is not None:
            self._listeners.append(on_page_change)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def buffer_display(self) -> str:
        return format_buffer(self._buffer)

    def snapshot(self) -> tuple[int, str]:
        with self._lock:
            return self._current_page, self._buffer

    def subscribe(self, listener: PageChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def handle_key(self, raw_key: Any) -> PageChangeEvent | None:
        """Feed one raw key token; anything but a single ASCII digit is ignored."""
        return self.add_digit(raw_key)

    def add_digit(self, digit: Any) -> PageChangeEvent | None:
        if classify_key(digit) is KeyClass.IGNORED:
            return None

        with self._lock:
            if len(self._buffer) >= BUFFER_LENGTH:
                return None
            buffer = self._buffer + digit
            if len(buffer) < BUFFER_LENGTH:
                self._buffer = buffer
                return None
            event = self._commit(int(buffer, 10), source="buffer")

        self._emit(event)
        return event

    def clear_buffer(self) -> None:
        with self._lock:
            self._buffer = ""

    def navigate_to_page(self, page_number: Any) -> PageChangeEvent | None:
        try:
            target = int(page_number)
        except (TypeError, ValueError):
            self._logger.warning("ignored navigation to %r", page_number, extra={"event": "navigate_ignored"})
            return None

        with self._lock:
            event = self._commit(target, source="direct")

        self._emit(event)
        return event

    def _commit(self, page_number: int, source: str) -> PageChangeEvent:
        self._current_page = page_number
        self._buffer = ""
        return PageChangeEvent(page_number=page_number, source=source)

    def _emit(self, event: PageChangeEvent) -> None:
        self._logger.info(
            "page change",
            extra={"event": "page_change", "page_number": event.page_number},
        )
        for listener in list(self._listeners):
            listener(event)
