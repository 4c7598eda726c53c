"""In-memory article cache shared by list pages and their detail sub-pages."""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterable

from .models import CachedArticle, Category

MAX_ARTICLES = 5
DEFAULT_TTL_S = 300


class ArticleCache:
    """Keeps the latest articles per category.

    Stored articles stay readable after the TTL runs out; the TTL only decides
    whether the list page should fetch again.
    """

    def __init__(self, ttl_s: float = DEFAULT_TTL_S, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_s = ttl_s
        self.clock = clock
        self._lock = threading.Lock()
        self._articles: dict[Category, tuple[CachedArticle, ...]] = {}
        self._fetched_at: dict[Category, float] = {}

    def store(self, category: Category | str, articles: Iterable[CachedArticle]) -> list[CachedArticle]:
        key = Category(category)
        kept = tuple(articles)[:MAX_ARTICLES]
        with self._lock:
            self._articles[key] = kept
            self._fetched_at[key] = self.clock()
        return list(kept)

    def articles(self, category: Category | str) -> list[CachedArticle]:
        with self._lock:
            return list(self._articles.get(Category(category), ()))

    def article(self, category: Category | str, index: int) -> CachedArticle | None:
        """Return the 1-based ``index`` article, or ``None`` when out of range."""
        articles = self.articles(category)
        if index < 1 or index > len(articles):
            return None
        return articles[index - 1]

    def is_fresh(self, category: Category | str) -> bool:
        key = Category(category)
        with self._lock:
            if not self._articles.get(key):
                return False
            return self.clock() - self._fetched_at[key] < self.ttl_s

    def clear(self) -> None:
        with self._lock:
            self._articles.clear()
            self._fetched_at.clear()
