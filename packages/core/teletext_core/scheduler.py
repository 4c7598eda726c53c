"""Timer scheduling for the screen sequencer.

All sequencer callbacks run on one dispatch thread. ``call_soon`` is the only
method other threads may use; it hands work back to the dispatch thread.
"""

from __future__ import annotations

import heapq
import itertools
import threading
from concurrent.futures import Executor, Future
from typing import Any, Callable, Protocol


class TimerHandle:
    def __init__(self, when_ms: int, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.when_ms = when_ms
        self._callback = callback
        self._args = args
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def run(self) -> None:
        if not self._cancelled:
            self._callback(*self._args)


class Scheduler(Protocol):
    def now_ms(self) -> int: ...

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class ManualScheduler:
    """Virtual millisecond clock; nothing runs until ``advance`` is called."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = int(start_ms)
        self._queue: list[tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def now_ms(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self._now + max(0, int(delay_ms)), callback, args)
        with self._lock:
            heapq.heappush(self._queue, (handle.when_ms, next(self._seq), handle))
        return handle

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        return self.call_later(0, callback, *args)

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for _, _, h in self._queue if not h.cancelled)

    def _pop_due(self, target_ms: int) -> TimerHandle | None:
        with self._lock:
            if self._queue and self._queue[0][0] <= target_ms:
                return heapq.heappop(self._queue)[2]
        return None

    def advance(self, delta_ms: int) -> None:
        target = self._now + max(0, int(delta_ms))
        while True:
            handle = self._pop_due(target)
            if handle is None:
                break
            self._now = max(self._now, handle.when_ms)
            handle.run()
        self._now = target

    def run_until_idle(self, limit_ms: int = 60_000) -> None:
        """Advance through every queued timer, up to ``limit_ms`` of virtual time."""
        deadline = self._now + limit_ms
        while True:
            with self._lock:
                live = [entry for entry in self._queue if not entry[2].cancelled]
                next_when = min((entry[0] for entry in live), default=None)
            if next_when is None or next_when > deadline:
                break
            self.advance(next_when - self._now)


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        if not future.set_running_or_notify_cancel():  # pragma: no cover
            return future
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future
