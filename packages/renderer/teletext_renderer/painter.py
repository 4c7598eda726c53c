"""Pillow painter for teletext frames."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from .frame import overlay_buffer
from .grid import GRID, GridSpec
from .models import RenderableGrid, RenderRequest
from .palette import rgb_for

CELL_WIDTH = 12
CELL_HEIGHT = 20


class GridPainter:
    """Draws a 40x24 character grid with palette colours on black."""

    def __init__(self, scale: int = 2, grid: GridSpec = GRID) -> None:
        self.scale = max(1, int(scale))
        self.grid = grid
        self.cell_width = CELL_WIDTH * self.scale
        self.cell_height = CELL_HEIGHT * self.scale
        self.width = self.cell_width * grid.columns
        self.height = self.cell_height * grid.rows
        self._font_cache: ImageFont.ImageFont | ImageFont.FreeTypeFont | None = None

    def render_image(self, request: RenderRequest, buffer_text: str = "") -> Image.Image:
        image = Image.new("RGB", (self.width, self.height), rgb_for("black"))
        draw = ImageDraw.Draw(image)

        header = overlay_buffer(request.formatted_header, request.page_number, buffer_text)
        self._draw_row(draw, self.grid.header_row, header, {})

        colors = {(c.row, c.column): c.color for c in request.formatted_grid.colors}
        for index, text in enumerate(request.formatted_grid.rows):
            row = self.grid.content_start_row + index
            self._draw_row(draw, row, text, colors)
        return image

    def render_static_image(self, noise: RenderableGrid) -> Image.Image:
        image = Image.new("RGB", (self.width, self.height), rgb_for("black"))
        draw = ImageDraw.Draw(image)
        colors = {(c.row, c.column): c.color for c in noise.colors}
        for index, text in enumerate(noise.rows[: self.grid.rows]):
            self._draw_row(draw, index + 1, text, colors)
        return image

    def save_png(self, request: RenderRequest, path: Path, buffer_text: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render_image(request, buffer_text).save(path, format="PNG")
        return path

    def save_static_png(self, noise: RenderableGrid, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render_static_image(noise).save(path, format="PNG")
        return path

    def _font(self):
        if self._font_cache is not None:
            return self._font_cache
        size = int(self.cell_height * 0.8)
        for name in ("DejaVuSansMono.ttf", "Courier New.ttf", "Menlo.ttc"):
            try:
                self._font_cache = ImageFont.truetype(name, size)
                return self._font_cache
            except Exception:
                continue
        self._font_cache = ImageFont.load_default()
        return self._font_cache

    def _draw_row(self, draw: ImageDraw.ImageDraw, row: int, text: str, colors: dict[tuple[int, int], str]) -> None:
        y = (row - 1) * self.cell_height
        font = self._font()
        for col, char in enumerate(text[: self.grid.columns]):
            if char == " ":
                continue
            fill = rgb_for(colors.get((row, col), "white"))
            draw.text((col * self.cell_width, y), char, font=font, fill=fill)
