"""Content gateway: the only code that queries the CMS.

Every operation contains its own failures. Transport, GraphQL and payload
errors are logged with the identifying argument and turned into the empty
value for the declared return type (``None``, ``[]`` or an empty ``Page``).
Only ``ConfigurationError`` propagates, since it means the process must not
serve at all.
"""

from __future__ import annotations

import base64
import binascii
import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from newsfront.exceptions import ConfigurationError
from newsfront.gateway import queries
from newsfront.gateway.client import get_client
from newsfront.gateway.normalize import (
    author_from,
    category_from,
    nodes_of,
    post_from,
    post_page_from,
    posts_from,
    slugs_of,
    tag_from,
)
from newsfront.schemas.content import Author, Category, Page, Post, Tag

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

ENUMERATION_PAGE_SIZE = 100
SCAN_LIMIT = 100

P = ParamSpec("P")
R = TypeVar("R")


def _log_failure(operation: str, identifier: object, exc: BaseException) -> None:
    # logging defers formatting to the handler, whose errors are routed to
    # Handler.handleError rather than raised to the caller.
    if identifier is None:
        logger.warning("Content gateway %s failed: %s", operation, exc)
    else:
        logger.warning("Content gateway %s failed for %r: %s", operation, identifier, exc)


def _contained(
    default: Callable[[], R],
    identify_by: str | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Turn any gateway failure into ``default()``, logging ``identify_by``."""

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except ConfigurationError:
                raise
            except Exception as exc:
                identifier = None
                if identify_by is not None:
                    bound = signature.bind_partial(*args, **kwargs)
                    identifier = bound.arguments.get(identify_by)
                _log_failure(func.__name__, identifier, exc)
                return default()

        return wrapper

    return decorator


def _empty_post_page() -> Page[Post]:
    return Page[Post].empty()


def decode_database_id(identifier: str) -> str:
    """Return the numeric id inside an opaque ``base64("type:123")`` identifier.

    Plain ids and anything that does not decode are returned unchanged.
    """
    try:
        decoded = base64.b64decode(identifier, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return identifier
    _, sep, tail = decoded.rpartition(":")
    return tail if sep and tail.isdigit() else identifier


def _is_same_post(post: Post, exclude_id: str) -> bool:
    excluded = {value for value in (exclude_id, decode_database_id(exclude_id)) if value}
    if not excluded:
        return False
    if post.id in excluded or decode_database_id(post.id) in excluded:
        return True
    return post.database_id is not None and str(post.database_id) in excluded


@_contained(_empty_post_page)
async def get_posts(first: int = 10, after: str | None = None) -> Page[Post]:
    """Fetch one page of posts, newest first."""
    data = await get_client().request(queries.GET_POSTS, {"first": first, "after": after})
    return post_page_from(data.get("posts"))


@_contained(lambda: None, identify_by="slug")
async def get_post_by_slug(slug: str) -> Post | None:
    data = await get_client().request(queries.GET_POST_BY_SLUG, {"slug": slug})
    return post_from(data.get("postBy"))


@_contained(lambda: None, identify_by="slug")
async def get_posts_by_category_slug(
    slug: str, first: int = 10, after: str | None = None
) -> Category | None:
    """Fetch a category together with one page of its posts."""
    data = await get_client().request(
        queries.GET_POSTS_BY_CATEGORY, {"slug": slug, "first": first, "after": after}
    )
    return category_from(data.get("category"))


@_contained(list)
async def get_categories(first: int = 20) -> list[Category]:
    data = await get_client().request(queries.GET_CATEGORIES, {"first": first})
    return [c for c in map(category_from, nodes_of(data.get("categories"))) if c is not None]


@_contained(lambda: None, identify_by="slug")
async def get_author_by_slug(slug: str) -> Author | None:
    data = await get_client().request(queries.GET_AUTHOR, {"slug": slug})
    return author_from(data.get("userBy"))


@_contained(lambda: None, identify_by="slug")
async def get_tag_by_slug(slug: str) -> Tag | None:
    data = await get_client().request(queries.GET_TAG, {"slug": slug})
    return tag_from(data.get("tag"))


@_contained(list, identify_by="category_id")
async def get_related_posts(category_id: str, exclude_id: str, first: int = 3) -> list[Post]:
    """Posts from the same category, never including ``exclude_id``.

    The CMS cannot exclude ids server-side, so one extra post is requested
    and the excluded post is filtered out here.
    """
    decoded = decode_database_id(category_id)
    variables: dict[str, Any] = {
        "categoryId": int(decoded) if decoded.isdigit() else decoded,
        "first": first + 1,
    }
    data = await get_client().request(queries.GET_RELATED_POSTS, variables)
    related = [
        post for post in posts_from(data.get("posts")) if not _is_same_post(post, exclude_id)
    ]
    return related[:first]


@_contained(list, identify_by="term")
async def search_posts(term: str, first: int = 20) -> list[Post]:
    data = await get_client().request(queries.SEARCH_POSTS, {"search": term, "first": first})
    return posts_from(data.get("posts"))


@_contained(list, identify_by="term")
async def scan_posts(term: str, first: int = SCAN_LIMIT) -> list[Post]:
    """Case-insensitive match of ``term`` over the most recent ``first`` posts.

    Looks at title, content, excerpt and author name. Stands in for a
    server-side filter the CMS query surface does not offer.
    """
    needle = term.strip().lower()
    if not needle:
        return []
    data = await get_client().request(queries.GET_POSTS_WITH_CONTENT, {"first": first})
    matches: list[Post] = []
    for post in posts_from(data.get("posts")):
        haystack = (
            post.title,
            post.content or "",
            post.excerpt,
            post.author.name if post.author else "",
        )
        if any(needle in field.lower() for field in haystack):
            matches.append(post)
    return matches


async def _walk_all_posts() -> list[Post]:
    """Follow ``endCursor`` until the CMS reports no further pages.

    A page claiming more results without a cursor, or repeating a cursor
    already followed, ends the walk.
    """
    client = get_client()
    posts: list[Post] = []
    followed: set[str] = set()
    after: str | None = None
    while True:
        data = await client.request(
            queries.GET_ALL_POSTS_SLUGS, {"first": ENUMERATION_PAGE_SIZE, "after": after}
        )
        page = post_page_from(data.get("posts"))
        posts.extend(page.nodes)
        info = page.page_info
        if not info.has_next_page:
            break
        if info.end_cursor is None:
            logger.warning(
                "CMS reported more posts without a cursor after %d posts; stopping", len(posts)
            )
            break
        if info.end_cursor in followed:
            logger.warning("CMS repeated cursor %r; stopping", info.end_cursor)
            break
        followed.add(info.end_cursor)
        after = info.end_cursor
    return posts


@_contained(list)
async def get_all_post_slugs() -> list[str]:
    return [post.slug for post in await _walk_all_posts()]


@_contained(list)
async def get_all_posts_with_dates() -> list[Post]:
    """Every post with slug, title, dates and primary category."""
    return await _walk_all_posts()


@_contained(list)
async def get_all_category_slugs() -> list[str]:
    data = await get_client().request(
        queries.GET_ALL_CATEGORIES_SLUGS, {"first": ENUMERATION_PAGE_SIZE}
    )
    return slugs_of(data.get("categories"))


@_contained(list)
async def get_all_author_slugs() -> list[str]:
    data = await get_client().request(
        queries.GET_ALL_AUTHORS_SLUGS, {"first": ENUMERATION_PAGE_SIZE}
    )
    return slugs_of(data.get("users"))


@_contained(list)
async def get_all_tag_slugs() -> list[str]:
    data = await get_client().request(
        queries.GET_ALL_TAGS_SLUGS, {"first": ENUMERATION_PAGE_SIZE}
    )
    return slugs_of(data.get("tags"))
