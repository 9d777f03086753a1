"""Tests for exhaustive post enumeration over cursor pagination."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from newsfront.gateway import content
from tests.conftest import FakeCMS, post_node


def _paged(
    sizes: list[int], cursors: list[str | None], has_next: list[bool]
) -> Any:
    """Serve ``len(sizes)`` pages; page i is requested with the previous cursor."""
    pages: list[dict[str, Any]] = []
    number = 1
    for size, cursor, more in zip(sizes, cursors, has_next, strict=True):
        nodes = [post_node(n) for n in range(number, number + size)]
        number += size
        pages.append(
            {"nodes": nodes, "pageInfo": {"hasNextPage": more, "endCursor": cursor}}
        )
    served: list[int] = []

    def handler(_q: str, _v: dict[str, Any]) -> dict[str, Any]:
        index = len(served)
        served.append(index)
        return {"data": {"posts": pages[index]}}

    return handler


class TestWalkAllPosts:
    async def test_follows_cursors_to_the_end(self, cms: FakeCMS) -> None:
        cms.respond(_paged([100, 100, 37], ["c1", "c2", "c3"], [True, True, False]))
        slugs = await content.get_all_post_slugs()
        assert len(slugs) == 237
        assert slugs == [f"post-{n}" for n in range(1, 238)]
        afters = [call["variables"]["after"] for call in cms.calls]
        assert afters == [None, "c1", "c2"]
        assert all(call["variables"]["first"] == 100 for call in cms.calls)

    async def test_single_page(self, cms: FakeCMS) -> None:
        cms.respond(_paged([3], [None], [False]))
        assert await content.get_all_post_slugs() == ["post-1", "post-2", "post-3"]
        assert len(cms.calls) == 1

    async def test_missing_cursor_stops(
        self, cms: FakeCMS, caplog: pytest.LogCaptureFixture
    ) -> None:
        cms.respond(_paged([100, 5], ["c1", None], [True, True]))
        with caplog.at_level(logging.WARNING, logger="newsfront.gateway.content"):
            slugs = await content.get_all_post_slugs()
        assert len(slugs) == 105
        assert len(cms.calls) == 2
        assert "without a cursor" in caplog.text

    async def test_repeated_cursor_stops(
        self, cms: FakeCMS, caplog: pytest.LogCaptureFixture
    ) -> None:
        cms.respond(_paged([2, 2, 2], ["c1", "c2", "c1"], [True, True, True]))
        with caplog.at_level(logging.WARNING, logger="newsfront.gateway.content"):
            slugs = await content.get_all_post_slugs()
        assert len(slugs) == 6
        assert len(cms.calls) == 3
        assert "repeated cursor" in caplog.text

    async def test_failure_mid_walk_returns_empty(self, cms: FakeCMS) -> None:
        healthy = _paged([100], ["c1"], [True])

        def handler(query: str, variables: dict[str, Any]) -> dict[str, Any]:
            if variables["after"] is None:
                return healthy(query, variables)
            return {"errors": [{"message": "timeout"}]}

        cms.respond(handler)
        assert await content.get_all_post_slugs() == []

    async def test_posts_with_dates_keep_category(self, cms: FakeCMS) -> None:
        cms.respond(_paged([2], [None], [False]))
        posts = await content.get_all_posts_with_dates()
        assert [p.primary_category_slug for p in posts] == ["tech", "tech"]
        assert posts[0].modified == "2026-01-16T12:30:00"
