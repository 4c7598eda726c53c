"""Fixed 40x24 teletext grid geometry and truncation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class GridSpec:
    columns: int = 40
    rows: int = 24
    header_row: int = 1
    content_start_row: int = 2
    content_rows: int = 23

    def __post_init__(self) -> None:
        if self.content_start_row + self.content_rows - 1 != self.rows:
            raise ValueError("content rows must end on the last grid row")
        if self.header_row >= self.content_start_row:
            raise ValueError("header row must precede the content area")

    @property
    def content_end_row(self) -> int:
        return self.content_start_row + self.content_rows - 1


GRID = GridSpec()


def truncate_row(text: str, grid: GridSpec = GRID) -> str:
    if len(text) <= grid.columns:
        return text
    return text[: grid.columns]


def truncate_rows(lines: Sequence[str], grid: GridSpec = GRID) -> list[str]:
    if len(lines) <= grid.content_rows:
        return list(lines)
    return list(lines[: grid.content_rows])
