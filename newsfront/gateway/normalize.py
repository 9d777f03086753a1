"""Convert untyped GraphQL payloads into typed content entities.

All defensive field access against CMS responses lives here. Nodes that lack
a slug are dropped instead of failing the whole response.
"""

from __future__ import annotations

from typing import Any

from newsfront.schemas.content import (
    Author,
    Category,
    FeaturedImage,
    Page,
    PageInfo,
    Post,
    Tag,
)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _as_opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _as_opt_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def nodes_of(connection: Any) -> list[dict[str, Any]]:
    """Return the dict nodes of a ``{nodes: [...]}`` connection."""
    nodes = _as_dict(connection).get("nodes")
    if not isinstance(nodes, list):
        return []
    return [node for node in nodes if isinstance(node, dict)]


def page_info_from(raw: Any) -> PageInfo:
    info = _as_dict(raw)
    return PageInfo(
        has_next_page=info.get("hasNextPage") is True,
        end_cursor=_as_opt_str(info.get("endCursor")),
    )


def featured_image_from(raw: Any) -> FeaturedImage | None:
    node = _as_dict(_as_dict(raw).get("node"))
    source_url = _as_opt_str(node.get("sourceUrl"))
    if source_url is None:
        return None
    details = _as_dict(node.get("mediaDetails"))
    return FeaturedImage(
        source_url=source_url,
        alt_text=_as_str(node.get("altText")),
        width=_as_opt_int(details.get("width")),
        height=_as_opt_int(details.get("height")),
    )


def post_from(raw: Any) -> Post | None:
    node = _as_dict(raw)
    slug = _as_opt_str(node.get("slug"))
    if slug is None:
        return None
    author_node = _as_dict(node.get("author")).get("node")
    return Post(
        id=_as_str(node.get("id")),
        database_id=_as_opt_int(node.get("databaseId")),
        title=_as_str(node.get("title")),
        slug=slug,
        excerpt=_as_str(node.get("excerpt")),
        content=_as_opt_str(node.get("content")),
        date=_as_opt_str(node.get("date")),
        modified=_as_opt_str(node.get("modified")),
        featured_image=featured_image_from(node.get("featuredImage")),
        author=author_from(author_node) if author_node is not None else None,
        categories=[c for c in map(category_from, nodes_of(node.get("categories"))) if c],
        tags=[t for t in map(tag_from, nodes_of(node.get("tags"))) if t],
    )


def posts_from(connection: Any) -> list[Post]:
    return [post for post in map(post_from, nodes_of(connection)) if post is not None]


def post_page_from(connection: Any) -> Page[Post]:
    return Page[Post](
        nodes=posts_from(connection),
        page_info=page_info_from(_as_dict(connection).get("pageInfo")),
    )


def author_from(raw: Any) -> Author | None:
    node = _as_dict(raw)
    slug = _as_opt_str(node.get("slug"))
    if slug is None:
        return None
    posts = node.get("posts")
    return Author(
        id=_as_str(node.get("id")),
        database_id=_as_opt_int(node.get("databaseId")),
        name=_as_str(node.get("name")),
        slug=slug,
        description=_as_str(node.get("description")),
        avatar_url=_as_opt_str(_as_dict(node.get("avatar")).get("url")),
        posts=posts_from(posts) if posts is not None else None,
    )


def tag_from(raw: Any) -> Tag | None:
    node = _as_dict(raw)
    slug = _as_opt_str(node.get("slug"))
    if slug is None:
        return None
    posts = node.get("posts")
    return Tag(
        id=_as_str(node.get("id")),
        database_id=_as_opt_int(node.get("databaseId")),
        name=_as_str(node.get("name")),
        slug=slug,
        description=_as_str(node.get("description")),
        posts=posts_from(posts) if posts is not None else None,
    )


def category_from(raw: Any) -> Category | None:
    node = _as_dict(raw)
    slug = _as_opt_str(node.get("slug"))
    if slug is None:
        return None
    posts = node.get("posts")
    return Category(
        id=_as_str(node.get("id")),
        database_id=_as_opt_int(node.get("databaseId")),
        name=_as_str(node.get("name")),
        slug=slug,
        description=_as_str(node.get("description")),
        posts=post_page_from(posts) if posts is not None else None,
    )


def slugs_of(connection: Any) -> list[str]:
    return [slug for node in nodes_of(connection) if (slug := _as_opt_str(node.get("slug")))]
