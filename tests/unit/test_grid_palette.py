import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from teletext_renderer.grid import GRID, GridSpec, truncate_row, truncate_rows
from teletext_renderer.palette import (
    PALETTE,
    TeletextColor,
    hex_for,
    is_valid_color,
    is_valid_hex,
    list_colors,
    rgb_for,
)


class GridTests(unittest.TestCase):
    def test_grid_constants(self):
        self.assertEqual((GRID.columns, GRID.rows), (40, 24))
        self.assertEqual(GRID.header_row, 1)
        self.assertEqual(GRID.content_start_row, 2)
        self.assertEqual(GRID.content_rows, 23)
        self.assertEqual(GRID.content_end_row, 24)

    def test_invalid_geometry_rejected(self):
        with self.assertRaises(ValueError):
            GridSpec(content_rows=22)
        with self.assertRaises(ValueError):
            GridSpec(header_row=2)

    def test_truncate_row(self):
        self.assertEqual(truncate_row(""), "")
        self.assertEqual(truncate_row("A" * 40), "A" * 40)
        self.assertEqual(truncate_row("A" * 39 + "BC"), "A" * 39 + "B")
        self.assertEqual(truncate_row(truncate_row("X" * 90)), "X" * 40)

    def test_truncate_rows(self):
        lines = [str(i) for i in range(30)]
        out = truncate_rows(lines)
        self.assertEqual(len(out), 23)
        self.assertEqual(out, lines[:23])
        self.assertEqual(truncate_rows(["a", "b"]), ["a", "b"])
        self.assertEqual(truncate_rows([]), [])


class PaletteTests(unittest.TestCase):
    def test_eight_colours(self):
        self.assertEqual(
            list_colors(),
            ["black", "white", "red", "green", "blue", "yellow", "cyan", "magenta"],
        )
        self.assertEqual(len(PALETTE), 8)

    def test_palette_is_read_only(self):
        with self.assertRaises(TypeError):
            PALETTE["orange"] = "#FFA500"  # type: ignore[index]

    def test_colour_names_are_case_sensitive(self):
        self.assertTrue(is_valid_color("red"))
        self.assertTrue(is_valid_color(TeletextColor.CYAN))
        self.assertFalse(is_valid_color("Red"))
        self.assertFalse(is_valid_color("orange"))
        self.assertFalse(is_valid_color(None))
        self.assertFalse(is_valid_color(3))

    def test_hex_values(self):
        self.assertTrue(is_valid_hex("#ff00ff"))
        self.assertTrue(is_valid_hex("#FFFFFF"))
        self.assertFalse(is_valid_hex("#FFA500"))
        self.assertFalse(is_valid_hex(0xFFFFFF))
        self.assertEqual(hex_for("yellow"), "#FFFF00")
        self.assertEqual(rgb_for(TeletextColor.BLUE), (0, 0, 255))

    def test_unknown_colour_has_no_hex(self):
        with self.assertRaises(KeyError):
            hex_for("orange")


if __name__ == "__main__":
    unittest.main()
