"""Shared test fixtures for NewsFront."""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from newsfront.config import Settings
from newsfront.gateway.client import close_client, init_client
from newsfront.main import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

TEST_ENDPOINT = "https://cms.example.com/graphql"

VALID_ENV: dict[str, str] = {
    "WPGRAPHQL_ENDPOINT": TEST_ENDPOINT,
    "REVALIDATE_SECRET": "test-revalidate-secret",
    "SITE_URL": "https://news.example.com",
    "SITE_TITLE": "Example News",
    "SITE_DESCRIPTION": "All the news that fits",
    "SITE_NAME": "Example News",
    "SITE_COPYRIGHT": "(c) Example News",
}


def opaque_id(kind: str, number: int) -> str:
    """Opaque WPGraphQL identifier, e.g. ``base64("post:12")``."""
    return base64.b64encode(f"{kind}:{number}".encode()).decode("ascii")


def post_node(number: int, *, category: str | None = "tech", **fields: Any) -> dict[str, Any]:
    """Raw GraphQL post node as the CMS returns it."""
    node: dict[str, Any] = {
        "id": opaque_id("post", number),
        "databaseId": number,
        "title": f"Post {number}",
        "slug": f"post-{number}",
        "excerpt": f"<p>Excerpt {number}</p>",
        "date": "2026-01-15T10:00:00",
        "modified": "2026-01-16T12:30:00",
        "featuredImage": None,
        "author": {"node": {"id": opaque_id("user", 1), "name": "Ada", "slug": "ada"}},
        "categories": {"nodes": []},
    }
    if category is not None:
        category_node = {
            "id": opaque_id("term", 7),
            "databaseId": 7,
            "name": category.title(),
            "slug": category,
        }
        node["categories"] = {"nodes": [category_node]}
    node.update(fields)
    return node


class FakeCMS:
    """Scripted GraphQL endpoint for ``httpx.MockTransport``.

    ``handler`` receives ``(query, variables)`` and returns either a JSON
    payload (sent with HTTP 200) or a ready ``httpx.Response``.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.handler: Callable[[str, dict[str, Any]], Any] = lambda _q, _v: {"data": {}}

    def respond(self, handler: Callable[[str, dict[str, Any]], Any]) -> None:
        self.handler = handler

    def respond_data(self, data: dict[str, Any]) -> None:
        self.handler = lambda _q, _v: {"data": data}

    def fail_with(self, exc: Exception) -> None:
        def _raise(_q: str, _v: dict[str, Any]) -> Any:
            raise exc

        self.handler = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append(body)
        result = self.handler(body["query"], body.get("variables") or {})
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)


@pytest.fixture
def test_settings() -> Settings:
    """Valid settings with no .env file involved."""
    return Settings(
        _env_file=None,
        wpgraphql_endpoint=TEST_ENDPOINT,
        revalidate_secret=VALID_ENV["REVALIDATE_SECRET"],
        site_url=VALID_ENV["SITE_URL"],
        site_title=VALID_ENV["SITE_TITLE"],
        site_description=VALID_ENV["SITE_DESCRIPTION"],
        site_name=VALID_ENV["SITE_NAME"],
        site_copyright=VALID_ENV["SITE_COPYRIGHT"],
        debug=True,
    )


@pytest.fixture
async def cms(test_settings: Settings) -> AsyncGenerator[FakeCMS]:
    """Install a shared GraphQL client backed by a scripted CMS."""
    await close_client()
    fake = FakeCMS()
    init_client(test_settings, transport=httpx.MockTransport(fake))
    yield fake
    await close_client()


@pytest.fixture
async def client(test_settings: Settings, cms: FakeCMS) -> AsyncGenerator[AsyncClient]:
    """HTTP client for an app wired to the scripted CMS.

    ASGITransport does not run the lifespan; the ``cms`` fixture installs
    the GraphQL client the lifespan would have built.
    """
    app = create_app(test_settings)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
