import random
import sys
import tempfile
import unittest
from datetime import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from teletext_renderer.formatter import format_header, format_page
from teletext_renderer.frame import blank_frame, overlay_buffer, render_text
from teletext_renderer.models import PageContent, RenderRequest
from teletext_renderer.noise import NOISE_CHARS, build_static_grid

try:
    from PIL import Image

    from teletext_renderer.painter import GridPainter
except Exception:  # pragma: no cover
    Image = None  # type: ignore[assignment]
    GridPainter = None  # type: ignore[assignment]


def _request(page_number=100, lines=("HELLO",), colors=None):
    return RenderRequest(
        page_number=page_number,
        formatted_header=format_header("TELETEXT ZERO", page_number, time(12, 0, 0)),
        formatted_grid=format_page(PageContent(lines=list(lines), colors=colors)),
        title="Test",
    )


class FrameTests(unittest.TestCase):
    def test_render_text_is_full_grid(self):
        lines = render_text(_request(lines=["A", "B"]))
        self.assertEqual(len(lines), 24)
        self.assertTrue(all(len(line) == 40 for line in lines))
        self.assertIn("P100", lines[0])
        self.assertEqual(lines[1].rstrip(), "A")
        self.assertEqual(lines[23], " " * 40)

    def test_buffer_overlay_replaces_page_token(self):
        header = format_header("TELETEXT ZERO", 100, time(12, 0, 0))
        self.assertEqual(overlay_buffer(header, 100, ""), header)
        typed = overlay_buffer(header, 100, "3..")
        self.assertIn("P3..", typed)
        self.assertNotIn("P100", typed)
        self.assertEqual(len(typed), 40)

    def test_buffer_overlay_leaves_page_name_alone(self):
        header = format_header("P100 TEXT", 100, time(12, 0, 0))
        typed = overlay_buffer(header, 100, "3..")
        self.assertEqual(typed, "P100 TEXT" + " " * 9 + "P3.." + " " * 10 + "12:00:00")

        lines = render_text(_request(), "30.")
        self.assertEqual(lines[0], "TELETEXT ZERO" + " " * 7 + "P30." + " " * 8 + "12:00:00")

    def test_blank_frame(self):
        frame = blank_frame()
        self.assertEqual(len(frame), 24)
        self.assertEqual(set("".join(frame)), {" "})


class NoiseTests(unittest.TestCase):
    def test_static_grid_fills_every_cell(self):
        noise = build_static_grid(random.Random(7))
        self.assertEqual(len(noise.rows), 24)
        self.assertTrue(all(len(row) == 40 for row in noise.rows))
        self.assertTrue(set("".join(noise.rows)) <= set(NOISE_CHARS))
        self.assertEqual(len(noise.colors), 24 * 40)
        self.assertEqual({c.color for c in noise.colors} - {"black", "white"}, set())

    def test_seeded_noise_is_repeatable(self):
        self.assertEqual(build_static_grid(random.Random(1)), build_static_grid(random.Random(1)))


@unittest.skipIf(GridPainter is None, "Pillow not installed")
class PainterTests(unittest.TestCase):
    def test_image_size_follows_scale(self):
        painter = GridPainter(scale=1)
        image = painter.render_image(_request())
        self.assertEqual(image.size, (480, 480))
        self.assertEqual(image.getpixel((0, image.size[1] - 1)), (0, 0, 0))

    def test_coloured_cell_is_painted(self):
        painter = GridPainter(scale=2)
        image = painter.render_image(_request(lines=["H" * 40], colors={2: {col: "red" for col in range(40)}}))
        row_top = painter.cell_height
        row = image.crop((0, row_top, painter.width, row_top + painter.cell_height))
        reds = [px for px in row.getdata() if px[0] > 0 and px[1] == 0 and px[2] == 0]
        self.assertTrue(reds)
        self.assertNotIn((255, 255, 255), set(row.getdata()))

    def test_save_png(self):
        painter = GridPainter(scale=1)
        with tempfile.TemporaryDirectory() as tmp:
            out = painter.save_png(_request(), Path(tmp) / "nested" / "page.png")
            self.assertTrue(out.exists())
            with Image.open(out) as img:
                self.assertEqual(img.format, "PNG")

    def test_static_image(self):
        painter = GridPainter(scale=1)
        image = painter.render_static_image(build_static_grid(random.Random(3)))
        self.assertEqual(image.size, (painter.width, painter.height))
        with tempfile.TemporaryDirectory() as tmp:
            out = painter.save_static_png(build_static_grid(random.Random(3)), Path(tmp) / "boot.png")
            with Image.open(out) as img:
                self.assertEqual(img.size, (painter.width, painter.height))


if __name__ == "__main__":
    unittest.main()
