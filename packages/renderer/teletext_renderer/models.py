"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

# grid row -> column -> palette colour name
ColorMap = Mapping[int, Mapping[int, str]]


@dataclass(frozen=True)
class PageContent:
    lines: Sequence[str] = ()
    colors: ColorMap | None = None


@dataclass(frozen=True)
class ColorCell:
    row: int
    column: int
    color: str


@dataclass(frozen=True)
class RenderableGrid:
    rows: tuple[str, ...] = ()
    colors: tuple[ColorCell, ...] = field(default_factory=tuple)

    def color_at(self, row: int, column: int) -> str | None:
        for cell in self.colors:
            if cell.row == row and cell.column == column:
                return cell.color
        return None


@dataclass(frozen=True)
class RenderRequest:
    page_number: int
    formatted_header: str
    formatted_grid: RenderableGrid
    title: str = ""
