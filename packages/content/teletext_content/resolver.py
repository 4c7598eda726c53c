"""Turn page numbers into resolved pages for the screen sequencer."""

from __future__ import annotations

from functools import partial

from teletext_core.models import ResolvedPage
from teletext_renderer.models import PageContent

from .cache import ArticleCache
from .feeds import FEED_SOURCES, FeedClient, FeedSource, WeatherClient
from .models import CachedArticle, Category, DetailBody, DynamicBody, LoaderKind, PageDefinition, WeatherReport
from .registry import PageRegistry
from .text import (
    article_missing_lines,
    fetch_failed_lines,
    format_article_page,
    format_list_page,
    format_weather_page,
    weather_failed_lines,
)


class ContentResolver:
    """Page source backed by the registry, the article cache and the feed clients.

    Fetch callables only do network work. Cache writes and page formatting
    happen in the completion callables, which the sequencer runs on its
    dispatch thread.
    """

    def __init__(
        self,
        registry: PageRegistry | None = None,
        cache: ArticleCache | None = None,
        feed_client: FeedClient | None = None,
        weather_client: WeatherClient | None = None,
        index_page: int = 100,
    ) -> None:
        self.registry = registry or PageRegistry(index_page=index_page)
        self.cache = cache or ArticleCache()
        self.feed_client = feed_client or FeedClient()
        self.weather_client = weather_client or WeatherClient()
        self.index_page = index_page

    @classmethod
    def from_config(cls, cfg, network: bool = True) -> "ContentResolver":
        index_page = cfg.navigation.index_page
        return cls(
            registry=PageRegistry(index_page=index_page),
            cache=ArticleCache(ttl_s=cfg.content.cache_ttl_s),
            feed_client=FeedClient(
                proxy_url=cfg.content.rss_proxy_url,
                timeout_s=cfg.content.fetch_timeout_s,
                enabled=network,
            ),
            weather_client=WeatherClient.from_config(cfg, enabled=network),
            index_page=index_page,
        )

    def resolve(self, page_number: int) -> ResolvedPage:
        page = self.registry.get_page(page_number)
        body = page.body
        if isinstance(body, DetailBody):
            return self._resolve_detail(page, body)
        if isinstance(body, DynamicBody):
            if body.loader_kind is LoaderKind.WEATHER:
                return self._resolve_weather(page, body)
            return self._resolve_feed(page, body, FEED_SOURCES[Category(body.loader_kind.value)])
        return ResolvedPage(page.page_number, page.title, PageContent(list(body.lines), page.colors))

    def _resolve_feed(self, page: PageDefinition, body: DynamicBody, source: FeedSource) -> ResolvedPage:
        if self.cache.is_fresh(source.category):
            lines = self._list_lines(source, self.cache.articles(source.category))
            return ResolvedPage(page.page_number, page.title, PageContent(lines, page.colors))

        return ResolvedPage(
            page.page_number,
            page.title,
            PageContent(list(body.lines), page.colors),
            fetch=partial(self.feed_client.fetch, source),
            complete=partial(self._complete_feed, source),
            fallback=PageContent(fetch_failed_lines(source.list_title, source.subject, self.index_page)),
        )

    def _complete_feed(self, source: FeedSource, articles: list[CachedArticle]) -> PageContent:
        kept = self.cache.store(source.category, articles)
        return PageContent(self._list_lines(source, kept))

    def _list_lines(self, source: FeedSource, articles: list[CachedArticle]) -> list[str]:
        return format_list_page(articles, source.list_title, source.list_page, self.index_page)

    def _resolve_weather(self, page: PageDefinition, body: DynamicBody) -> ResolvedPage:
        return ResolvedPage(
            page.page_number,
            page.title,
            PageContent(list(body.lines), page.colors),
            fetch=self.weather_client.fetch,
            complete=self._complete_weather,
            fallback=PageContent(weather_failed_lines(self.index_page)),
        )

    def _complete_weather(self, report: WeatherReport) -> PageContent:
        return PageContent(format_weather_page(report, self.index_page))

    def _resolve_detail(self, page: PageDefinition, body: DetailBody) -> ResolvedPage:
        source = FEED_SOURCES[body.category]
        article = self.cache.article(body.category, body.index)
        if article is None:
            lines = article_missing_lines(body.back_page, body.category.value)
        else:
            lines = format_article_page(article, source.detail_source, body.back_page)
        return ResolvedPage(page.page_number, page.title, PageContent(lines, page.colors))
