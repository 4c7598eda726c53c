"""Page registry: numbered pages, detail sub-pages and the not-found page."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .models import Category, DetailBody, DynamicBody, LoaderKind, PageDefinition, StaticBody
from .text import DIVIDER, not_found_lines

INDEX_PAGE = 100

DETAIL_RANGES = MappingProxyType(
    {
        Category.NEWS: (201, 205, "News Article", 200),
        Category.TECH: (301, 305, "Tech Article", 300),
        Category.SPORTS: (501, 505, "Sports Article", 500),
    }
)

_INDEX_LINES = (
    "WELCOME TO TELETEXT ZERO",
    "",
    "A Slow Web Browser",
    "",
    "Main Sections:",
    "",
    "200 - World News (BBC)",
    "300 - Tech News (The Verge)",
    "400 - Weather",
    "500 - Sports (ESPN)",
    "",
    "666 - ???",
    "",
    "Enter a 3-digit page number",
    "to navigate.",
)


def _index_colors() -> dict[int, dict[int, str]]:
    # Keys are grid rows: content line i sits on row i + 2.
    colors: dict[int, dict[int, str]] = {2: {col: "yellow" for col in range(len(_INDEX_LINES[0]))}}
    for line_no, color in ((6, "cyan"), (7, "cyan"), (8, "cyan"), (9, "cyan"), (11, "red")):
        colors[line_no + 2] = {col: color for col in range(3)}
    return colors


def default_pages() -> list[PageDefinition]:
    return [
        PageDefinition(INDEX_PAGE, "Index", StaticBody(_INDEX_LINES), colors=_index_colors()),
        PageDefinition(
            200,
            "World News",
            DynamicBody(
                ("BBC WORLD NEWS", "", "LOADING...", "", "Please wait while we fetch", "the latest headlines."),
                LoaderKind.NEWS,
            ),
        ),
        PageDefinition(
            300,
            "Tech News",
            DynamicBody(
                ("THE VERGE", "", "LOADING...", "", "Please wait while we fetch", "the latest tech headlines."),
                LoaderKind.TECH,
            ),
        ),
        PageDefinition(
            400,
            "Weather",
            DynamicBody(
                ("WEATHER FORECAST", "", "LOADING...", "", "Fetching weather data..."),
                LoaderKind.WEATHER,
            ),
        ),
        PageDefinition(
            500,
            "Sports",
            DynamicBody(
                ("ESPN SPORTS", "", "LOADING...", "", "Please wait while we fetch", "the latest sports news."),
                LoaderKind.SPORTS,
            ),
        ),
        PageDefinition(
            666,
            "System Diagnostics",
            StaticBody(
                (
                    "SYSTEM DIAGNOSTICS",
                    "",
                    DIVIDER,
                    "",
                    "SIGNAL DECAY............... 99%",
                    "MEMORY CORRUPTION.......... 87%",
                    "TEMPORAL DRIFT............. ACTIVE",
                    "",
                    DIVIDER,
                    "",
                    "SUBJECT: WATCHING",
                    "STATUS: AWARE",
                    "",
                    "WARNING: ANOMALY DETECTED",
                    "",
                    "DO NOT LOOK BEHIND YOU",
                    "",
                    DIVIDER,
                    "",
                    "LAST TRANSMISSION: 1983-10-31",
                    "ORIGIN: UNKNOWN",
                    "",
                    "THEY NEVER LEFT",
                )
            ),
        ),
    ]


def create_error_page(page_number: int, index_page: int = INDEX_PAGE) -> PageDefinition:
    return PageDefinition(page_number, "Error", StaticBody(tuple(not_found_lines(page_number, index_page))))


def detail_category(page_number: int) -> Category | None:
    for category, (low, high, _, _) in DETAIL_RANGES.items():
        if low <= page_number <= high:
            return category
    return None


class PageRegistry:
    def __init__(self, pages: Iterable[PageDefinition] | None = None, index_page: int = INDEX_PAGE) -> None:
        self.index_page = index_page
        self._pages: dict[int, PageDefinition] = {}
        for page in default_pages() if pages is None else pages:
            self.register(page)

    @property
    def pages(self) -> Mapping[int, PageDefinition]:
        return MappingProxyType(self._pages)

    def register(self, page: PageDefinition) -> None:
        self._pages[page.page_number] = page

    def get_page(self, page_number: int) -> PageDefinition:
        """Never fails: unknown numbers yield the not-found page."""
        page = self._pages.get(page_number)
        if page is not None:
            return page

        category = detail_category(page_number)
        if category is not None:
            _, _, title, back_page = DETAIL_RANGES[category]
            # 201 -> article 1, 305 -> article 5
            return PageDefinition(page_number, title, DetailBody(category, page_number % 10, back_page))

        return create_error_page(page_number, self.index_page)

    def describe(self) -> list[dict[str, Any]]:
        rows = [
            {"page_number": page.page_number, "title": page.title, "kind": page.kind}
            for page in self._pages.values()
        ]
        for category, (low, high, title, _) in DETAIL_RANGES.items():
            rows.append({"page_number": f"{low}-{high}", "title": title, "kind": "detail"})
        return sorted(rows, key=lambda row: str(row["page_number"]))
