"""Renderer package: grid constraints, palette, formatting and painting."""

from .formatter import format_buffer, format_header, format_page, format_page_number, format_time
from .frame import blank_frame, overlay_buffer, render_text
from .grid import GRID, GridSpec, truncate_row, truncate_rows
from .models import ColorCell, ColorMap, PageContent, RenderableGrid, RenderRequest
from .noise import build_static_grid
from .palette import PALETTE, TeletextColor, hex_for, is_valid_color, is_valid_hex, list_colors, rgb_for

try:  # pragma: no cover - optional at import time for test environments
    from .painter import GridPainter
except Exception:  # pragma: no cover
    GridPainter = None  # type: ignore[assignment]

__all__ = [
    "GRID",
    "PALETTE",
    "ColorCell",
    "ColorMap",
    "GridSpec",
    "PageContent",
    "RenderRequest",
    "RenderableGrid",
    "TeletextColor",
    "blank_frame",
    "build_static_grid",
    "format_buffer",
    "format_header",
    "format_page",
    "format_page_number",
    "format_time",
    "hex_for",
    "is_valid_color",
    "is_valid_hex",
    "list_colors",
    "overlay_buffer",
    "render_text",
    "rgb_for",
    "truncate_row",
    "truncate_rows",
]

if GridPainter is not None:
    __all__.append("GridPainter")
