"""Screen sequencer: booting -> clearing -> displaying, with cancellable page turns."""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from teletext_renderer.formatter import format_header, format_page
from teletext_renderer.models import PageContent, RenderRequest

from .logging_setup import get_logger
from .models import PageChangeEvent, PageSource, ResolvedPage, ScreenState
from .navigation import NavigationStateMachine
from .scheduler import Scheduler, TimerHandle

DEFAULT_PAGE_NAME = "TELETEXT ZERO"
MIN_BOOT_MS = 1000
MAX_CLEARING_MS = 500

StateListener = Callable[[ScreenState], None]
RenderListener = Callable[[RenderRequest], None]


def fetch_failed_content(index_page: int = 100) -> PageContent:
    return PageContent(
        lines=[
            "SERVICE TEMPORARILY UNAVAILABLE",
            "",
            "================================",
            "",
            "ERROR: UNABLE TO FETCH DATA",
            "",
            f"Press {index_page} for index",
        ]
    )


def loading_content(static: PageContent) -> PageContent:
    lines = list(static.lines[:3]) + ["", "FETCHING DATA...", "", "Please wait."]
    return PageContent(lines=lines, colors=static.colors)


@dataclass
class _Transition:
    generation: int
    page: ResolvedPage
    content: PageContent
    fetch_pending: bool
    requested_at_ms: int


class ScreenSequencer:
    def __init__(
        self,
        navigation: NavigationStateMachine,
        source: PageSource,
        scheduler: Scheduler,
        executor: Executor | None = None,
        boot_ms: int = 1000,
        clearing_ms: int = 100,
        page_name: str = DEFAULT_PAGE_NAME,
        index_page: int = 100,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.navigation = navigation
        self.source = source
        self.scheduler = scheduler
        self.boot_ms = max(MIN_BOOT_MS, int(boot_ms))
        self.clearing_ms = max(0, min(MAX_CLEARING_MS, int(clearing_ms)))
        self.page_name = page_name
        self.index_page = index_page
        self.clock = clock

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="teletext-fetch")
        self._lock = threading.RLock()
        self._logger = get_logger("sequencer")
        self._state = ScreenState.BOOTING
        self._started = False
        self._timer: TimerHandle | None = None
        self._generation = 0
        self._transition: _Transition | None = None
        self._displayed_page: int | None = None
        self._last_render: RenderRequest | None = None
        self._state_listeners: list[StateListener] = []
        self._render_listeners: list[RenderListener] = []
        self._events: list[dict[str, Any]] = []

        self._unsubscribe = navigation.subscribe(self._on_page_change)

    @classmethod
    def from_config(cls, cfg, navigation, source, scheduler, executor=None, clock=datetime.now) -> "ScreenSequencer":
        return cls(
            navigation,
            source,
            scheduler,
            executor=executor,
            boot_ms=cfg.timing.boot_ms,
            clearing_ms=cfg.timing.clearing_ms,
            page_name=cfg.ui.page_name,
            index_page=cfg.navigation.index_page,
            clock=clock,
        )

    @property
    def state(self) -> ScreenState:
        return self._state

    @property
    def displayed_page(self) -> int | None:
        return self._displayed_page

    @property
    def target_page(self) -> int | None:
        transition = self._transition
        return transition.page.page_number if transition else None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_render(self) -> RenderRequest | None:
        return self._last_render

    def subscribe_state(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def subscribe_render(self, listener: RenderListener) -> None:
        self._render_listeners.append(listener)

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "t_ms": self.scheduler.now_ms(),
            "event": event,
            "state": self._state.value,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._started = True
            self._set_state(ScreenState.BOOTING)
            self._timer = self.scheduler.call_later(self.boot_ms, self._on_boot_elapsed)
            self._log_event("boot_start", boot_ms=self.boot_ms)

    def stop(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._transition = None
            self._unsubscribe()
            self._log_event("stop")
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def refresh_header(self, now: datetime | None = None) -> RenderRequest | None:
        """Re-emit the current page with a fresh clock; content is not re-fetched."""
        with self._lock:
            if self._state is not ScreenState.DISPLAYING or self._last_render is None:
                return None
            header = format_header(self.page_name, self._last_render.page_number, now or self.clock())
            self._last_render = RenderRequest(
                page_number=self._last_render.page_number,
                formatted_header=header,
                formatted_grid=self._last_render.formatted_grid,
                title=self._last_render.title,
            )
            for listener in list(self._render_listeners):
                listener(self._last_render)
            return self._last_render

    def _set_state(self, state: ScreenState) -> None:
        self._state = state
        for listener in list(self._state_listeners):
            listener(state)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_page_change(self, event: PageChangeEvent) -> None:
        with self._lock:
            if not self._started or self._state is ScreenState.BOOTING:
                self._log_event("navigate_during_boot", page_number=event.page_number)
                return
            if self._state is ScreenState.DISPLAYING and event.page_number == self._displayed_page:
                self._log_event("navigate_same_page", page_number=event.page_number)
                return
            if self._transition is not None and self._timer is not None:
                self._log_event("transition_superseded", page_number=self._transition.page.page_number)
            self._enter_clearing(event.page_number)

    def _on_boot_elapsed(self) -> None:
        with self._lock:
            self._timer = None
            self._log_event("boot_done")
            self._enter_clearing(self.navigation.current_page)

    def _resolve(self, page_number: int) -> ResolvedPage:
        try:
            return self.source.resolve(page_number)
        except Exception:
            self._logger.exception("page resolution failed", extra={"event": "resolve_failed", "page_number": page_number})
            return ResolvedPage(page_number=page_number, title="Error", content=fetch_failed_content(self.index_page))

    def _enter_clearing(self, page_number: int) -> None:
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._set_state(ScreenState.CLEARING)

        page = self._resolve(page_number)
        transition = _Transition(
            generation=generation,
            page=page,
            content=page.content,
            fetch_pending=page.fetch is not None,
            requested_at_ms=self.scheduler.now_ms(),
        )
        self._transition = transition
        self._log_event("clearing", page_number=page_number, generation=generation, dynamic=page.is_dynamic)

        if page.fetch is not None:
            self._submit_fetch(transition)
        self._timer = self.scheduler.call_later(self.clearing_ms, self._on_clearing_elapsed, generation)

    def _submit_fetch(self, transition: _Transition) -> None:
        generation = transition.generation
        try:
            future = self._executor.submit(transition.page.fetch)  # type: ignore[arg-type]
        except RuntimeError as exc:
            self._fail_fetch(transition, exc)
            return
        future.add_done_callback(lambda f: self.scheduler.call_soon(self._on_fetch_done, generation, f))

    def _fail_fetch(self, transition: _Transition, exc: BaseException) -> None:
        self._logger.warning(
            f"content fetch failed: {exc}",
            extra={"event": "fetch_failed", "page_number": transition.page.page_number},
        )
        self._log_event("fetch_failed", page_number=transition.page.page_number, error=str(exc))
        transition.content = transition.page.fallback or fetch_failed_content(self.index_page)
        transition.fetch_pending = False

    def _on_fetch_done(self, generation: int, future: Future) -> None:
        with self._lock:
            transition = self._transition
            if transition is None or transition.generation != generation:
                self._log_event("fetch_stale", generation=generation)
                return

            try:
                result = future.result()
                content = self._complete(transition.page, result)
            except Exception as exc:
                self._fail_fetch(transition, exc)
            else:
                transition.content = content
                transition.fetch_pending = False
                self._log_event("fetch_ok", page_number=transition.page.page_number, generation=generation)

            if self._state is ScreenState.DISPLAYING:
                self._render(transition.page, transition.content)

    @staticmethod
    def _complete(page: ResolvedPage, result: Any) -> PageContent:
        if page.complete is not None:
            return page.complete(result)
        if isinstance(result, PageContent):
            return result
        return PageContent(lines=list(result), colors=page.content.colors)

    def _on_clearing_elapsed(self, generation: int) -> None:
        with self._lock:
            transition = self._transition
            if transition is None or generation != self._generation:
                return
            self._timer = None
            content = loading_content(transition.page.content) if transition.fetch_pending else transition.content
            self._displayed_page = transition.page.page_number
            self._set_state(ScreenState.DISPLAYING)
            latency = self.scheduler.now_ms() - transition.requested_at_ms
            self._log_event("displaying", page_number=self._displayed_page, latency_ms=latency)
            self._render(transition.page, content)

    def _render(self, page: ResolvedPage, content: PageContent) -> None:
        request = RenderRequest(
            page_number=page.page_number,
            formatted_header=format_header(self.page_name, page.page_number, self.clock()),
            formatted_grid=format_page(content),
            title=page.title,
        )
        self._last_render = request
        self._logger.info(
            "render",
            extra={"event": "render", "page_number": page.page_number, "generation": self._generation},
        )
        for listener in list(self._render_listeners):
            listener(request)
