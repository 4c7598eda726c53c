"""Plain-text frames: a render request laid out as 24 rows of 40 characters."""

from __future__ import annotations

from .formatter import format_page_number
from .grid import GRID, GridSpec, truncate_row
from .models import RenderRequest


def overlay_buffer(header: str, page_number: int, buffer_text: str) -> str:
    """Show a partially typed page number in place of the header page token."""
    if not buffer_text:
        return header
    token = format_page_number(page_number)
    # The page name may itself contain the token; the clock never does.
    start = header.rfind(token)
    if start < 0:
        return header
    typed = ("P" + buffer_text)[: len(token)].ljust(len(token))
    return header[:start] + typed + header[start + len(token) :]


def render_text(request: RenderRequest, buffer_text: str = "", grid: GridSpec = GRID) -> list[str]:
    header = overlay_buffer(request.formatted_header, request.page_number, buffer_text)
    lines = [truncate_row(header, grid).ljust(grid.columns)]
    for row in request.formatted_grid.rows:
        lines.append(row.ljust(grid.columns))
    while len(lines) < grid.rows:
        lines.append(" " * grid.columns)
    return lines


def blank_frame(grid: GridSpec = GRID) -> list[str]:
    return [" " * grid.columns for _ in range(grid.rows)]
