"""The eight broadcast teletext colours."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class TeletextColor(str, Enum):
    BLACK = "black"
    WHITE = "white"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    CYAN = "cyan"
    MAGENTA = "magenta"


PALETTE: Mapping[str, str] = MappingProxyType(
    {
        "black": "#000000",
        "white": "#FFFFFF",
        "red": "#FF0000",
        "green": "#00FF00",
        "blue": "#0000FF",
        "yellow": "#FFFF00",
        "cyan": "#00FFFF",
        "magenta": "#FF00FF",
    }
)

_HEX_VALUES = frozenset(PALETTE.values())


def _name(color: object) -> object:
    if isinstance(color, TeletextColor):
        return color.value
    return color


def list_colors() -> list[str]:
    return list(PALETTE.keys())


def is_valid_color(name: object) -> bool:
    name = _name(name)
    return isinstance(name, str) and name in PALETTE


def is_valid_hex(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return value.upper() in _HEX_VALUES


def hex_for(color: str | TeletextColor) -> str:
    """Return the canonical hex value. Callers must validate ``color`` first."""
    return PALETTE[_name(color)]  # type: ignore[index]


def rgb_for(color: str | TeletextColor) -> tuple[int, int, int]:
    value = hex_for(color)
    return tuple(int(value[i : i + 2], 16) for i in (1, 3, 5))  # type: ignore[return-value]
