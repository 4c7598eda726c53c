"""HTTP clients for RSS headlines (via rss2json) and Open-Meteo weather."""

from __future__ import annotations

import json
import os
import ssl
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

import certifi

from teletext_core.logging_setup import get_logger

from .models import CachedArticle, Category, DailyForecast, WeatherReport
from .text import clean_text

RSS_PROXY_URL = "https://api.rss2json.com/v1/api.json"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
REVERSE_GEOCODE_URL = "https://nominatim.openstreetmap.org/reverse"
USER_AGENT = "TeletextZero/0.1 (+https://github.com/teletext-zero/teletext-zero)"
UNKNOWN_LOCATION = "YOUR LOCATION"
DAY_LABELS = ("TODAY", "TOMORROW", "DAY AFTER")

WEATHER_CODES = {
    0: "CLEAR SKY",
    1: "MAINLY CLEAR",
    2: "PARTLY CLOUDY",
    3: "OVERCAST",
    45: "FOG",
    48: "DEPOSITING RIME FOG",
    51: "LIGHT DRIZZLE",
    53: "MODERATE DRIZZLE",
    55: "DENSE DRIZZLE",
    56: "FREEZING DRIZZLE",
    57: "DENSE FREEZING DRIZZLE",
    61: "SLIGHT RAIN",
    63: "MODERATE RAIN",
    65: "HEAVY RAIN",
    66: "FREEZING RAIN",
    67: "HEAVY FREEZING RAIN",
    71: "SLIGHT SNOW",
    73: "MODERATE SNOW",
    75: "HEAVY SNOW",
    77: "SNOW GRAINS",
    80: "SLIGHT SHOWERS",
    81: "MODERATE SHOWERS",
    82: "VIOLENT SHOWERS",
    85: "SLIGHT SNOW SHOWERS",
    86: "HEAVY SNOW SHOWERS",
    95: "THUNDERSTORM",
    96: "THUNDERSTORM W/ HAIL",
    99: "THUNDERSTORM W/ HEAVY HAIL",
}


class FeedError(RuntimeError):
    """A remote feed could not be fetched or understood."""


@dataclass(frozen=True)
class FeedSource:
    category: Category
    rss_url: str
    list_title: str
    detail_source: str
    list_page: int
    subject: str = "NEWS"
    default_description: str = ""


FEED_SOURCES = {
    Category.NEWS: FeedSource(
        category=Category.NEWS,
        rss_url="http://feeds.bbci.co.uk/news/world/rss.xml",
        list_title="BBC WORLD NEWS",
        detail_source="BBC NEWS",
        list_page=200,
    ),
    Category.TECH: FeedSource(
        category=Category.TECH,
        rss_url="https://www.theverge.com/rss/index.xml",
        list_title="THE VERGE",
        detail_source="THE VERGE",
        list_page=300,
        default_description="No description available.",
    ),
    Category.SPORTS: FeedSource(
        category=Category.SPORTS,
        rss_url="https://www.espn.com/espn/rss/news",
        list_title="ESPN SPORTS",
        detail_source="ESPN SPORTS",
        list_page=500,
        subject="SPORTS",
    ),
}


def weather_description(code: Any) -> str:
    try:
        return WEATHER_CODES.get(int(code), "UNKNOWN")
    except (TypeError, ValueError):
        return "UNKNOWN"


def _build_ssl_context() -> ssl.SSLContext:
    ca_bundle = os.environ.get("TELETEXT_CA_BUNDLE", "").strip()
    if ca_bundle:
        return ssl.create_default_context(cafile=ca_bundle)
    return ssl.create_default_context(cafile=certifi.where())


def _get_json(url: str, timeout_s: float) -> Any:
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"})
    try:
        with urllib.request.urlopen(request, timeout=timeout_s, context=_build_ssl_context()) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:
        raise FeedError(f"HTTP {exc.code} from {urllib.parse.urlsplit(url).netloc}") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise FeedError(f"request failed: {exc}") from exc
    except ValueError as exc:
        raise FeedError(f"invalid JSON payload: {exc}") from exc


class FeedClient:
    def __init__(self, proxy_url: str = RSS_PROXY_URL, timeout_s: float = 10, enabled: bool = True) -> None:
        self.proxy_url = proxy_url
        self.timeout_s = timeout_s
        self.enabled = enabled
        self._logger = get_logger("feeds")

    def request_url(self, rss_url: str) -> str:
        return f"{self.proxy_url}?rss_url={urllib.parse.quote(rss_url, safe='')}"

    def fetch(self, source: FeedSource) -> list[CachedArticle]:
        if not self.enabled:
            raise FeedError("network access disabled")
        payload = _get_json(self.request_url(source.rss_url), self.timeout_s)
        if not isinstance(payload, dict) or payload.get("status") != "ok":
            raise FeedError(f"feed proxy rejected {source.rss_url}")
        items = payload.get("items")
        if not isinstance(items, list):
            raise FeedError("feed payload has no items")

        articles = []
        for item in items:
            if not isinstance(item, dict):
                continue
            articles.append(
                CachedArticle(
                    title=clean_text(item.get("title")),
                    description=item.get("description") or source.default_description,
                    url=item.get("link"),
                    pub_date=item.get("pubDate"),
                    author=item.get("author") or None,
                )
            )
        self._logger.info(
            f"fetched {len(articles)} {source.category.value} articles",
            extra={"event": "feed_fetched"},
        )
        return articles


class WeatherClient:
    def __init__(
        self,
        latitude: float = 51.5074,
        longitude: float = -0.1278,
        city: str | None = "LONDON",
        timeout_s: float = 10,
        enabled: bool = True,
    ) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.city = city
        self.timeout_s = timeout_s
        self.enabled = enabled
        self._logger = get_logger("weather")

    @classmethod
    def from_config(cls, cfg, enabled: bool = True) -> "WeatherClient":
        return cls(
            latitude=cfg.weather.latitude,
            longitude=cfg.weather.longitude,
            city=cfg.weather.city,
            timeout_s=cfg.content.fetch_timeout_s,
            enabled=enabled,
        )

    def forecast_url(self) -> str:
        query = urllib.parse.urlencode(
            {
                "latitude": self.latitude,
                "longitude": self.longitude,
                "current": "temperature_2m,weather_code,wind_speed_10m,relative_humidity_2m",
                "daily": "temperature_2m_max,temperature_2m_min,weather_code",
                "timezone": "auto",
            }
        )
        return f"{FORECAST_URL}?{query}"

    def city_name(self) -> str:
        """Configured city, else a best-effort reverse geocode."""
        if self.city:
            return self.city.upper()

        query = urllib.parse.urlencode({"lat": self.latitude, "lon": self.longitude, "format": "json"})
        try:
            payload = _get_json(f"{REVERSE_GEOCODE_URL}?{query}", self.timeout_s)
        except FeedError as exc:
            self._logger.warning(f"reverse geocode failed: {exc}", extra={"event": "geocode_failed"})
            return UNKNOWN_LOCATION

        address = payload.get("address") if isinstance(payload, dict) else None
        if not isinstance(address, dict):
            return UNKNOWN_LOCATION
        name = address.get("city") or address.get("town") or address.get("village")
        return str(name).upper() if name else UNKNOWN_LOCATION

    def fetch(self) -> WeatherReport:
        if not self.enabled:
            raise FeedError("network access disabled")
        city = self.city_name()
        payload = _get_json(self.forecast_url(), self.timeout_s)
        try:
            current = payload["current"]
            daily = payload["daily"]
            maxima = daily["temperature_2m_max"]
            minima = daily["temperature_2m_min"]
            codes = daily["weather_code"]
            days = tuple(
                DailyForecast(
                    label=DAY_LABELS[i],
                    min_c=float(minima[i]),
                    max_c=float(maxima[i]),
                    description=weather_description(codes[i]),
                )
                for i in range(min(len(DAY_LABELS), len(maxima), len(minima), len(codes)))
            )
            return WeatherReport(
                city=city,
                description=weather_description(current["weather_code"]),
                temperature_c=float(current["temperature_2m"]),
                humidity_pct=float(current["relative_humidity_2m"]),
                wind_kmh=float(current["wind_speed_10m"]),
                days=days,
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise FeedError(f"malformed forecast payload: {exc}") from exc
