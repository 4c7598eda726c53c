"""Header and page formatting against the fixed teletext grid.

Everything here is total: malformed page content is clipped or dropped,
never raised.
"""

from __future__ import annotations

from typing import Any, Mapping

from .grid import GRID, GridSpec, truncate_row, truncate_rows
from .models import ColorCell, PageContent, RenderableGrid
from .palette import TeletextColor, is_valid_color

TIME_WIDTH = 8


def format_time(value: Any) -> str:
    return f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"


def format_page_number(page_number: int) -> str:
    return f"P{int(page_number):03d}"


def format_header(page_name: str, page_number: int, time: Any, grid: GridSpec = GRID) -> str:
    """Lay out ``NAME   P100   12:00:00`` across exactly ``grid.columns``.

    The name is not clipped; callers keep it within ``columns - 12``.
    Odd padding goes after the page token.
    """
    token = format_page_number(page_number)
    clock = format_time(time)
    spaces = grid.columns - len(page_name) - len(token) - len(clock)
    before = spaces // 2
    after = spaces - before
    return page_name + " " * before + token + " " * after + clock


def format_buffer(buffer: str) -> str:
    if len(buffer) == 0:
        return ""
    if len(buffer) == 1:
        return f"{buffer}.."
    if len(buffer) == 2:
        return f"{buffer}."
    return buffer


def _as_line(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _color_cells(colors: Any, rows: list[str], grid: GridSpec) -> list[ColorCell]:
    if not isinstance(colors, Mapping):
        return []

    cells: list[ColorCell] = []
    for row_key, columns in colors.items():
        if not isinstance(row_key, int) or not isinstance(columns, Mapping):
            continue
        index = row_key - grid.content_start_row
        if index < 0 or index >= len(rows):
            continue
        width = len(rows[index])
        for col_key, color in columns.items():
            if not isinstance(col_key, int) or col_key < 0 or col_key >= width:
                continue
            if not is_valid_color(color):
                continue
            name = color.value if isinstance(color, TeletextColor) else color
            cells.append(ColorCell(row=row_key, column=col_key, color=name))

    cells.sort(key=lambda c: (c.row, c.column))
    return cells


def format_page(content: PageContent, grid: GridSpec = GRID) -> RenderableGrid:
    raw_lines = getattr(content, "lines", None) or ()
    try:
        lines = [_as_line(line) for line in raw_lines]
    except TypeError:
        lines = []

    rows = [truncate_row(line, grid) for line in truncate_rows(lines, grid)]
    cells = _color_cells(getattr(content, "colors", None), rows, grid)
    return RenderableGrid(rows=tuple(rows), colors=tuple(cells))
