"""Shape feed text into 40-column teletext pages."""

from __future__ import annotations

import html
import math
import re
from typing import Sequence

from teletext_renderer.grid import GRID, GridSpec

from .models import CachedArticle, WeatherReport

DIVIDER = "=" * 32
RULE = "-" * 32
HEADLINE_TITLE_WIDTH = 31
DETAIL_BODY_ROWS = 21
NO_DESCRIPTION = "No description available."

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def clean_text(text: str | None) -> str:
    if not text:
        return ""
    stripped = _TAG_RE.sub("", str(text))
    return _SPACE_RE.sub(" ", html.unescape(stripped)).strip()


def word_wrap(text: str | None, width: int = GRID.columns) -> list[str]:
    """Wrap on word boundaries; words longer than ``width`` are hard-split."""
    cleaned = clean_text(text)
    if not cleaned:
        return []

    lines: list[str] = []
    current = ""
    for word in cleaned.split(" "):
        if len(word) > width:
            if current:
                lines.append(current)
                current = ""
            lines.extend(word[i : i + width] for i in range(0, len(word), width))
            continue

        candidate = f"{current} {word}" if current else word
        if len(candidate) <= width:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word

    if current:
        lines.append(current)
    return lines


def ellipsize(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max(0, max_len - 2)] + ".."


def round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def format_headline(index: int, title: str, base_page: int, grid: GridSpec = GRID) -> str:
    """One list row: ``"1. Title...            P201"``.

    ``index`` is the 0-based position in the list; the sub-page is
    ``base_page + index + 1`` and sits flush against the right edge.
    """
    number = index + 1
    prefix = f"{number}. "
    suffix = f" P{base_page + number}"
    title = ellipsize(title, HEADLINE_TITLE_WIDTH)
    padding = max(0, grid.columns - len(prefix) - len(title) - len(suffix))
    return f"{prefix}{title}{' ' * padding}{suffix}"


def format_list_page(
    articles: Sequence[CachedArticle],
    title: str,
    base_page: int,
    index_page: int = 100,
) -> list[str]:
    lines = [title, "", DIVIDER, ""]
    for position, article in enumerate(articles):
        lines.append(format_headline(position, article.title, base_page))
        lines.append("")
    lines.extend([DIVIDER, "", "Type page number for full story", "", f"Press {index_page} for index"])
    return lines


def format_article_page(article: CachedArticle, source: str, back_page: int, grid: GridSpec = GRID) -> list[str]:
    """Detail page whose footer always lands inside the content area."""
    lines = [source, "", DIVIDER, ""]
    footer_rows = 2

    # A title long enough to crowd out the body is clipped so at least one
    # description line and the overflow marker still fit.
    max_title_rows = grid.content_rows - len(lines) - 3 - footer_rows - 2
    lines.extend(word_wrap(article.title.upper(), grid.columns)[:max_title_rows])
    lines.extend(["", RULE, ""])

    max_body = grid.content_rows - len(lines) - footer_rows - 1
    if article.description:
        body = word_wrap(article.description, grid.columns)
        lines.extend(body[: max(1, max_body)])
        if len(body) > max_body:
            lines.append("...")
    else:
        lines.append(NO_DESCRIPTION)

    while len(lines) < DETAIL_BODY_ROWS:
        lines.append("")
    lines.extend(["", f"Press {back_page} for headlines"])
    return lines


def _number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def format_weather_page(report: WeatherReport, index_page: int = 100) -> list[str]:
    lines = [
        "WEATHER FORECAST",
        "",
        DIVIDER,
        "",
        f"LOCATION: {ellipsize(report.city, 28)}",
        "",
        "CURRENT CONDITIONS:",
        f"  {report.description}",
        f"  TEMPERATURE:  {round_half_up(report.temperature_c)}C",
        f"  HUMIDITY:     {_number(report.humidity_pct)}%",
        f"  WIND SPEED:   {round_half_up(report.wind_kmh)} km/h",
        "",
        DIVIDER,
        "",
        "3-DAY FORECAST:",
    ]
    for day in report.days[:3]:
        lines.append(f"  {day.label}: {round_half_up(day.min_c)}C - {round_half_up(day.max_c)}C")
        lines.append(f"          {day.description}")
    lines.extend(["", f"Press {index_page} for index"])
    return lines


def not_found_lines(page_number: int, index_page: int = 100) -> list[str]:
    return [
        "PAGE NOT FOUND",
        "",
        f"Page {page_number} does not exist.",
        "",
        "Please try another page number.",
        "",
        f"Press {index_page} to return to the index.",
    ]


def article_missing_lines(list_page: int, noun: str) -> list[str]:
    return [
        "ARTICLE NOT FOUND",
        "",
        f"Please visit Page {list_page} first",
        f"to load the {noun} headlines.",
        "",
        f"Press {list_page} for headlines",
    ]


def fetch_failed_lines(title: str, subject: str = "NEWS", index_page: int = 100) -> list[str]:
    return [
        title,
        "",
        DIVIDER,
        "",
        f"ERROR: UNABLE TO FETCH {subject}",
        "",
        "Service temporarily unavailable.",
        "",
        f"Press {index_page} for index",
    ]


def weather_failed_lines(index_page: int = 100) -> list[str]:
    return [
        "WEATHER SERVICE",
        "",
        DIVIDER,
        "",
        "ERROR: UNABLE TO FETCH WEATHER",
        "",
        "Please check:",
        "- Location settings",
        "- Internet connection",
        "",
        f"Press {index_page} for index",
    ]
