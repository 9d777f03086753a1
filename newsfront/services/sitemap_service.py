"""XML sitemaps (standard, Google News, categories) and robots.txt."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from newsfront.gateway.content import get_all_category_slugs, get_all_posts_with_dates
from newsfront.services.datetime_service import format_date, format_iso, now_utc, parse_optional

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from newsfront.schemas.content import Post

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
NEWS_NS = "http://www.google.com/schemas/sitemap-news/0.9"
DEFAULT_CATEGORY_SLUG = "news"
DEFAULT_PUBLICATION_NAME = "News Site"
DEFAULT_BASE_URL = "http://localhost:8000"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: str) -> str:
    return escape(value, _XML_ENTITIES)


@dataclass(frozen=True)
class NewsInfo:
    publication_name: str
    language: str
    publication_date: datetime
    title: str


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: datetime
    changefreq: str
    priority: float
    news: NewsInfo | None = None


def post_url(base_url: str, post: Post) -> str:
    category = post.primary_category_slug or DEFAULT_CATEGORY_SLUG
    return f"{base_url.rstrip('/')}/{category}/{post.slug}"


def _post_lastmod(post: Post, fallback: datetime) -> datetime:
    return parse_optional(post.modified) or parse_optional(post.date) or fallback


def category_entries(
    base_url: str, category_slugs: Iterable[str], now: datetime
) -> list[SitemapEntry]:
    base = base_url.rstrip("/")
    return [
        SitemapEntry(loc=f"{base}/{slug}", lastmod=now, changefreq="daily", priority=0.8)
        for slug in category_slugs
    ]


def post_entries(base_url: str, posts: Iterable[Post], now: datetime) -> list[SitemapEntry]:
    return [
        SitemapEntry(
            loc=post_url(base_url, post),
            lastmod=_post_lastmod(post, now),
            changefreq="weekly",
            priority=0.6,
        )
        for post in posts
    ]


def news_entries(
    base_url: str,
    posts: Iterable[Post],
    publication_name: str,
    now: datetime,
    language: str = "en",
) -> list[SitemapEntry]:
    entries: list[SitemapEntry] = []
    for post in posts:
        published = parse_optional(post.date) or now
        entries.append(
            SitemapEntry(
                loc=post_url(base_url, post),
                lastmod=_post_lastmod(post, now),
                changefreq="weekly",
                priority=0.6,
                news=NewsInfo(
                    publication_name=publication_name,
                    language=language,
                    publication_date=published,
                    title=post.title,
                ),
            )
        )
    return entries


def sitemap_entries(
    base_url: str,
    posts: Sequence[Post],
    category_slugs: Sequence[str],
    now: datetime,
) -> list[SitemapEntry]:
    """Home page, then categories, then posts."""
    home = SitemapEntry(loc=base_url.rstrip("/"), lastmod=now, changefreq="daily", priority=1.0)
    return [
        home,
        *category_entries(base_url, category_slugs, now),
        *post_entries(base_url, posts, now),
    ]


def _render_entry(entry: SitemapEntry) -> str:
    lines = [
        "  <url>",
        f"    <loc>{escape_xml(entry.loc)}</loc>",
        f"    <lastmod>{format_iso(entry.lastmod)}</lastmod>",
        f"    <changefreq>{entry.changefreq}</changefreq>",
        f"    <priority>{entry.priority:.1f}</priority>",
    ]
    if entry.news is not None:
        news = entry.news
        lines.extend(
            [
                "    <news:news>",
                "      <news:publication>",
                f"        <news:name>{escape_xml(news.publication_name)}</news:name>",
                f"        <news:language>{escape_xml(news.language)}</news:language>",
                "      </news:publication>",
                "      <news:publication_date>"
                f"{format_date(news.publication_date)}</news:publication_date>",
                f"      <news:title>{escape_xml(news.title)}</news:title>",
                "    </news:news>",
            ]
        )
    lines.append("  </url>")
    return "\n".join(lines)


def render_urlset(entries: Iterable[SitemapEntry], *, news: bool = False) -> str:
    """Render entries as a sitemap ``<urlset>`` document."""
    namespaces = f'xmlns="{SITEMAP_NS}"'
    if news:
        namespaces += f'\n        xmlns:news="{NEWS_NS}"'
    body = "\n".join(_render_entry(entry) for entry in entries)
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<urlset {namespaces}>\n{body}\n</urlset>\n'


def render_robots(base_url: str) -> str:
    base = base_url.rstrip("/")
    return (
        "User-agent: *\n"
        "Allow: /\n"
        "Disallow: /api/\n"
        "Disallow: /admin/\n"
        "\n"
        f"Sitemap: {base}/sitemap.xml\n"
        f"Sitemap: {base}/sitemap-categories.xml\n"
        f"Sitemap: {base}/sitemap-news.xml\n"
    )


async def build_sitemap(base_url: str) -> str:
    """Sitemap of the home page, every category and every post."""
    posts, categories = await asyncio.gather(get_all_posts_with_dates(), get_all_category_slugs())
    logger.debug("Sitemap: %d posts, %d categories", len(posts), len(categories))
    return render_urlset(sitemap_entries(base_url, posts, categories, now_utc()))


async def build_news_sitemap(base_url: str, publication_name: str | None) -> str:
    posts = await get_all_posts_with_dates()
    entries = news_entries(base_url, posts, publication_name or DEFAULT_PUBLICATION_NAME, now_utc())
    return render_urlset(entries, news=True)


async def build_category_sitemap(base_url: str) -> str:
    categories = await get_all_category_slugs()
    return render_urlset(category_entries(base_url, categories, now_utc()))
