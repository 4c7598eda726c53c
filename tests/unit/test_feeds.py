import json
import sys
import unittest
import urllib.error
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "content"))

from teletext_content.feeds import FEED_SOURCES, FeedClient, FeedError, WeatherClient, weather_description
from teletext_content.models import Category


class _FakeResponse:
    def __init__(self, payload):
        self._payload = payload
        self.headers = {}

    def read(self):
        if isinstance(self._payload, bytes):
            return self._payload
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


FORECAST = {
    "current": {
        "temperature_2m": 12.6,
        "weather_code": 3,
        "wind_speed_10m": 18.4,
        "relative_humidity_2m": 81,
    },
    "daily": {
        "temperature_2m_max": [14.2, 15.0, 11.5, 10.0],
        "temperature_2m_min": [7.1, 8.4, 5.5, 4.0],
        "weather_code": [3, 61, 95, 0],
    },
}


class FeedClientTests(unittest.TestCase):
    def test_request_url_encodes_feed(self):
        client = FeedClient()
        url = client.request_url("http://feeds.bbci.co.uk/news/world/rss.xml")
        self.assertEqual(
            url,
            "https://api.rss2json.com/v1/api.json?rss_url=http%3A%2F%2Ffeeds.bbci.co.uk%2Fnews%2Fworld%2Frss.xml",
        )

    def test_fetch_parses_items(self):
        payload = {
            "status": "ok",
            "items": [
                {"title": "Big &amp; <b>bold</b> news", "description": "<p>Body</p>", "link": "https://x/1"},
                {"title": "Second", "description": "", "link": "https://x/2", "pubDate": "2024-01-01"},
            ],
        }
        with patch("urllib.request.urlopen", return_value=_FakeResponse(payload)):
            articles = FeedClient().fetch(FEED_SOURCES[Category.TECH])
        self.assertEqual(articles[0].title, "Big & bold news")
        self.assertEqual(articles[0].url, "https://x/1")
        self.assertEqual(articles[1].description, "No description available.")
        self.assertEqual(articles[1].pub_date, "2024-01-01")

    def test_non_ok_status_raises(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse({"status": "error", "message": "bad"})):
            with self.assertRaises(FeedError):
                FeedClient().fetch(FEED_SOURCES[Category.NEWS])

    def test_http_error_raises_feed_error(self):
        err = urllib.error.HTTPError("https://api.rss2json.com", 503, "down", None, None)
        with patch("urllib.request.urlopen", side_effect=err):
            with self.assertRaises(FeedError):
                FeedClient().fetch(FEED_SOURCES[Category.SPORTS])

    def test_malformed_json_raises_feed_error(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse(b"<html>")):
            with self.assertRaises(FeedError):
                FeedClient().fetch(FEED_SOURCES[Category.NEWS])

    def test_disabled_client_never_calls_out(self):
        with patch("urllib.request.urlopen") as urlopen:
            with self.assertRaises(FeedError):
                FeedClient(enabled=False).fetch(FEED_SOURCES[Category.NEWS])
        urlopen.assert_not_called()


class WeatherClientTests(unittest.TestCase):
    def test_forecast_url(self):
        url = WeatherClient().forecast_url()
        self.assertTrue(url.startswith("https://api.open-meteo.com/v1/forecast?latitude=51.5074&longitude=-0.1278"))
        self.assertIn("timezone=auto", url)

    def test_fetch_builds_report(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse(FORECAST)) as urlopen:
            report = WeatherClient(city="london").fetch()
        self.assertEqual(urlopen.call_count, 1)
        self.assertEqual(report.city, "LONDON")
        self.assertEqual(report.description, "OVERCAST")
        self.assertEqual(len(report.days), 3)
        self.assertEqual(report.days[1].label, "TOMORROW")
        self.assertEqual(report.days[2].description, "THUNDERSTORM")

    def test_reverse_geocode_without_city(self):
        responses = [_FakeResponse({"address": {"town": "Reading"}}), _FakeResponse(FORECAST)]
        with patch("urllib.request.urlopen", side_effect=responses):
            report = WeatherClient(latitude=51.45, longitude=-0.97, city=None).fetch()
        self.assertEqual(report.city, "READING")

    def test_geocode_failure_uses_placeholder(self):
        err = urllib.error.URLError("offline")
        with patch("urllib.request.urlopen", side_effect=err):
            self.assertEqual(WeatherClient(city=None).city_name(), "YOUR LOCATION")

    def test_malformed_forecast_raises(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse({"current": {}})):
            with self.assertRaises(FeedError):
                WeatherClient().fetch()

    def test_weather_codes(self):
        self.assertEqual(weather_description(0), "CLEAR SKY")
        self.assertEqual(weather_description(99), "THUNDERSTORM W/ HEAVY HAIL")
        self.assertEqual(weather_description(42), "UNKNOWN")
        self.assertEqual(weather_description(None), "UNKNOWN")


if __name__ == "__main__":
    unittest.main()
