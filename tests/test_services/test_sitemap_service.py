"""Tests for sitemap and robots.txt rendering."""

from __future__ import annotations

from datetime import datetime, timezone
from xml.etree import ElementTree

from newsfront.schemas.content import Category, Post
from newsfront.services.sitemap_service import (
    NEWS_NS,
    SITEMAP_NS,
    category_entries,
    escape_xml,
    news_entries,
    post_url,
    render_robots,
    render_urlset,
    sitemap_entries,
)

BASE = "https://news.example.com"
NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
NS = {"sm": SITEMAP_NS, "news": NEWS_NS}


def _post(slug: str, category: str | None = "tech", **fields: object) -> Post:
    categories = [Category(id="c1", slug=category)] if category else []
    return Post(id=f"id-{slug}", slug=slug, categories=categories, **fields)


class TestPostUrl:
    def test_uses_primary_category(self) -> None:
        assert post_url(BASE, _post("hello")) == f"{BASE}/tech/hello"

    def test_default_category(self) -> None:
        assert post_url(BASE + "/", _post("hello", category=None)) == f"{BASE}/news/hello"


class TestEntries:
    def test_order_home_categories_posts(self) -> None:
        entries = sitemap_entries(BASE, [_post("p1")], ["tech", "world"], NOW)
        assert [e.loc for e in entries] == [
            BASE,
            f"{BASE}/tech",
            f"{BASE}/world",
            f"{BASE}/tech/p1",
        ]
        assert [e.priority for e in entries] == [1.0, 0.8, 0.8, 0.6]
        assert [e.changefreq for e in entries] == ["daily", "daily", "daily", "weekly"]

    def test_post_lastmod_prefers_modified(self) -> None:
        post = _post("p1", date="2026-01-15T10:00:00", modified="2026-01-16T12:30:00")
        (_, entry) = sitemap_entries(BASE, [post], [], NOW)
        assert entry.lastmod.day == 16

    def test_post_lastmod_falls_back_to_date_then_now(self) -> None:
        dated = _post("p1", date="2026-01-15T10:00:00")
        undated = _post("p2")
        entries = sitemap_entries(BASE, [dated, undated], [], NOW)
        assert entries[1].lastmod.day == 15
        assert entries[2].lastmod == NOW

    def test_category_entries(self) -> None:
        (entry,) = category_entries(BASE, ["tech"], NOW)
        assert entry.loc == f"{BASE}/tech"
        assert entry.lastmod == NOW


class TestRenderUrlset:
    def test_well_formed_sitemap(self) -> None:
        xml = render_urlset(sitemap_entries(BASE, [_post("p1")], ["tech"], NOW))
        root = ElementTree.fromstring(xml)
        locs = [el.text for el in root.findall("sm:url/sm:loc", NS)]
        assert locs == [BASE, f"{BASE}/tech", f"{BASE}/tech/p1"]
        priorities = [el.text for el in root.findall("sm:url/sm:priority", NS)]
        assert priorities == ["1.0", "0.8", "0.6"]
        assert root.find("sm:url/sm:lastmod", NS).text == "2026-03-01T09:00:00+00:00"

    def test_empty_urlset(self) -> None:
        root = ElementTree.fromstring(render_urlset([]))
        assert root.findall("sm:url", NS) == []

    def test_news_sitemap(self) -> None:
        post = _post("p1", title="Rock & Roll <live>", date="2026-02-10T23:30:00")
        xml = render_urlset(news_entries(BASE, [post], "Example News", NOW), news=True)
        root = ElementTree.fromstring(xml)
        news = root.find("sm:url/news:news", NS)
        assert news is not None
        assert news.find("news:publication/news:name", NS).text == "Example News"
        assert news.find("news:publication/news:language", NS).text == "en"
        assert news.find("news:publication_date", NS).text == "2026-02-10"
        assert news.find("news:title", NS).text == "Rock & Roll <live>"
        assert "Rock &amp; Roll &lt;live&gt;" in xml

    def test_loc_escaped(self) -> None:
        xml = render_urlset(category_entries(BASE, ["a&b"], NOW))
        assert f"<loc>{BASE}/a&amp;b</loc>" in xml


class TestEscapeXml:
    def test_all_five_entities(self) -> None:
        assert escape_xml("<a href=\"x\">'&'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;&apos;&amp;&apos;&lt;/a&gt;"
        )


class TestRobots:
    def test_robots_txt(self) -> None:
        robots = render_robots(BASE + "/")
        assert "User-agent: *" in robots
        assert "Disallow: /api/" in robots
        assert "Disallow: /admin/" in robots
        assert f"Sitemap: {BASE}/sitemap.xml" in robots
        assert f"Sitemap: {BASE}/sitemap-news.xml" in robots
        assert f"Sitemap: {BASE}/sitemap-categories.xml" in robots
