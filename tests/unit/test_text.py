import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "content"))

from teletext_content.models import CachedArticle, DailyForecast, WeatherReport
from teletext_content.text import (
    DIVIDER,
    article_missing_lines,
    clean_text,
    ellipsize,
    fetch_failed_lines,
    format_article_page,
    format_headline,
    format_list_page,
    format_weather_page,
    not_found_lines,
    round_half_up,
    word_wrap,
)


class CleanAndWrapTests(unittest.TestCase):
    def test_clean_text(self):
        self.assertEqual(clean_text("<p>Fish &amp; chips</p>\n\n  today&nbsp;only"), "Fish & chips today only")
        self.assertEqual(clean_text(None), "")

    def test_word_wrap_breaks_on_words(self):
        lines = word_wrap("the quick brown fox jumps over the lazy dog", width=10)
        self.assertEqual(lines, ["the quick", "brown fox", "jumps over", "the lazy", "dog"])

    def test_word_wrap_hard_splits_long_words(self):
        lines = word_wrap("ab " + "x" * 25, width=10)
        self.assertEqual(lines, ["ab", "x" * 10, "x" * 10, "x" * 5])
        self.assertEqual(word_wrap(""), [])

    def test_ellipsize(self):
        self.assertEqual(ellipsize("short", 10), "short")
        self.assertEqual(ellipsize("abcdefghijk", 10), "abcdefgh..")

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-0.4), 0)
        self.assertEqual(round_half_up(11.49), 11)


class PageLayoutTests(unittest.TestCase):
    def test_headline_is_exactly_forty_columns(self):
        line = format_headline(0, "Short title", 200)
        self.assertEqual(len(line), 40)
        self.assertTrue(line.startswith("1. Short title"))
        self.assertTrue(line.endswith(" P201"))

        long_line = format_headline(4, "T" * 60, 300)
        self.assertEqual(len(long_line), 40)
        self.assertEqual(long_line, "5. " + "T" * 29 + "..  P305")

    def test_list_page(self):
        articles = [CachedArticle(title=f"Story {i}") for i in range(3)]
        lines = format_list_page(articles, "BBC WORLD NEWS", 200)
        self.assertEqual(lines[:4], ["BBC WORLD NEWS", "", DIVIDER, ""])
        self.assertTrue(lines[4].endswith("P201"))
        self.assertTrue(lines[8].endswith("P203"))
        self.assertEqual(lines[-1], "Press 100 for index")
        self.assertLessEqual(len(lines), 23)

    def test_article_page_footer_stays_on_screen(self):
        article = CachedArticle(title="Headline " * 3, description="word " * 400)
        lines = format_article_page(article, "BBC NEWS", 200)
        self.assertEqual(len(lines), 23)
        self.assertEqual(lines[-1], "Press 200 for headlines")
        self.assertIn("...", lines)
        self.assertTrue(all(len(line) <= 40 for line in lines))

    def test_article_page_with_huge_title(self):
        article = CachedArticle(title="W" * 39 + " " + "word " * 200, description="body text")
        lines = format_article_page(article, "THE VERGE", 300)
        self.assertLessEqual(len(lines), 23)
        self.assertEqual(lines[-1], "Press 300 for headlines")

    def test_article_page_short_is_padded(self):
        lines = format_article_page(CachedArticle(title="Brief", description=""), "ESPN SPORTS", 500)
        self.assertIn("No description available.", lines)
        self.assertEqual(len(lines), 23)
        self.assertEqual(lines[4], "BRIEF")

    def test_weather_page(self):
        report = WeatherReport(
            city="LONDON",
            description="PARTLY CLOUDY",
            temperature_c=14.5,
            humidity_pct=72,
            wind_kmh=11.2,
            days=(
                DailyForecast("TODAY", 9.4, 15.6, "OVERCAST"),
                DailyForecast("TOMORROW", 8.0, 13.0, "SLIGHT RAIN"),
                DailyForecast("DAY AFTER", 7.5, 12.5, "FOG"),
            ),
        )
        lines = format_weather_page(report)
        self.assertIn("LOCATION: LONDON", lines)
        self.assertIn("  TEMPERATURE:  15C", lines)
        self.assertIn("  HUMIDITY:     72%", lines)
        self.assertIn("  WIND SPEED:   11 km/h", lines)
        self.assertIn("  TODAY: 9C - 16C", lines)
        self.assertIn("          SLIGHT RAIN", lines)
        self.assertEqual(lines[-1], "Press 100 for index")
        self.assertLessEqual(len(lines), 23)

    def test_error_blocks(self):
        self.assertEqual(not_found_lines(999)[2], "Page 999 does not exist.")
        self.assertEqual(article_missing_lines(300, "tech")[3], "to load the tech headlines.")
        self.assertEqual(fetch_failed_lines("ESPN SPORTS", "SPORTS")[4], "ERROR: UNABLE TO FETCH SPORTS")


if __name__ == "__main__":
    unittest.main()
