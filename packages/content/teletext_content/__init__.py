"""Page content: registry, article cache, feed clients and text shaping."""

from .cache import ArticleCache
from .feeds import FEED_SOURCES, FeedClient, FeedError, FeedSource, WeatherClient
from .models import (
    CachedArticle,
    Category,
    DailyForecast,
    DetailBody,
    DynamicBody,
    LoaderKind,
    PageDefinition,
    StaticBody,
    WeatherReport,
)
from .registry import PageRegistry, create_error_page, default_pages
from .resolver import ContentResolver

__all__ = [
    "FEED_SOURCES",
    "ArticleCache",
    "CachedArticle",
    "Category",
    "ContentResolver",
    "DailyForecast",
    "DetailBody",
    "DynamicBody",
    "FeedClient",
    "FeedError",
    "FeedSource",
    "LoaderKind",
    "PageDefinition",
    "PageRegistry",
    "StaticBody",
    "WeatherClient",
    "WeatherReport",
    "create_error_page",
    "default_pages",
]
