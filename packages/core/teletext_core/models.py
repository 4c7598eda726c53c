"""Typed models shared by navigation, sequencing and content sources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from teletext_renderer.models import PageContent


class ScreenState(str, Enum):
    BOOTING = "booting"
    CLEARING = "clearing"
    DISPLAYING = "displaying"


class KeyClass(str, Enum):
    DIGIT = "digit"
    IGNORED = "ignored"


@dataclass(frozen=True)
class PageChangeEvent:
    page_number: int
    source: str = "buffer"


@dataclass(frozen=True)
class ResolvedPage:
    """A page as the sequencer sees it.

    ``fetch`` runs on a worker thread and must not touch shared state.
    ``complete`` turns its result into content and runs on the dispatch thread.
    ``fallback`` replaces the content when either of them fails.
    """

    page_number: int
    title: str
    content: PageContent
    fetch: Callable[[], Any] | None = None
    complete: Callable[[Any], PageContent] | None = None
    fallback: PageContent | None = None

    @property
    def is_dynamic(self) -> bool:
        return self.fetch is not None


class PageSource(Protocol):
    def resolve(self, page_number: int) -> ResolvedPage: ...
