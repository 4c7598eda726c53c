"""Static noise shown while the terminal is booting."""

from __future__ import annotations

import random

from .grid import GRID, GridSpec
from .models import ColorCell, RenderableGrid

NOISE_CHARS = ("█", "▓", "▒", "░", " ", "▪", "▫", "■", "□")
NOISE_COLORS = ("black", "white")


def build_static_grid(rng: random.Random | None = None, grid: GridSpec = GRID) -> RenderableGrid:
    """Fill every grid cell, header row included, with a random glyph.

    Colour cells use grid row numbers starting at 1.
    """
    rng = rng or random.Random()
    rows: list[str] = []
    cells: list[ColorCell] = []
    for row in range(grid.rows):
        chars = []
        for col in range(grid.columns):
            chars.append(rng.choice(NOISE_CHARS))
            cells.append(ColorCell(row=row + 1, column=col, color=rng.choice(NOISE_COLORS)))
        rows.append("".join(chars))
    return RenderableGrid(rows=tuple(rows), colors=tuple(cells))
