"""Page definitions and feed data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from teletext_renderer.models import ColorMap


class Category(str, Enum):
    NEWS = "news"
    TECH = "tech"
    SPORTS = "sports"


class LoaderKind(str, Enum):
    NEWS = "news"
    TECH = "tech"
    SPORTS = "sports"
    WEATHER = "weather"


@dataclass(frozen=True)
class CachedArticle:
    title: str
    description: str = ""
    url: str | None = None
    pub_date: str | None = None
    author: str | None = None


@dataclass(frozen=True)
class DailyForecast:
    label: str
    min_c: float
    max_c: float
    description: str


@dataclass(frozen=True)
class WeatherReport:
    city: str
    description: str
    temperature_c: float
    humidity_pct: float
    wind_kmh: float
    days: tuple[DailyForecast, ...] = ()


@dataclass(frozen=True)
class StaticBody:
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class DynamicBody:
    """Placeholder lines plus the kind of loader that replaces them."""

    lines: tuple[str, ...]
    loader_kind: LoaderKind


@dataclass(frozen=True)
class DetailBody:
    category: Category
    index: int
    back_page: int


PageBody = Union[StaticBody, DynamicBody, DetailBody]


@dataclass(frozen=True)
class PageDefinition:
    page_number: int
    title: str
    body: PageBody = field(default_factory=StaticBody)
    colors: ColorMap | None = None

    @property
    def is_dynamic(self) -> bool:
        return isinstance(self.body, DynamicBody)

    @property
    def kind(self) -> str:
        if isinstance(self.body, DynamicBody):
            return "dynamic"
        if isinstance(self.body, DetailBody):
            return "detail"
        return "static"
