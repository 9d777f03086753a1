"""Cache policy: Cache-Control directives and CDN cache tags per resource class."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

_STATIC_ASSET_RE = re.compile(r"\.(js|css|png|jpg|jpeg|svg|gif|webp)$", re.IGNORECASE)
_CACHEABLE_METHODS = frozenset({"GET", "HEAD"})

EDGE_ASSET_CACHE_CONTROL = "public, max-age=31536000, immutable"
EDGE_API_CACHE_CONTROL = "public, max-age=300, s-maxage=300"
EDGE_PAGE_CACHE_CONTROL = "public, max-age=3600, s-maxage=86400"


class ResourceClass(StrEnum):
    PAGE = "page"
    ASSET = "asset"
    IMAGE = "image"
    API = "api"
    ANALYTICS_BEACON = "analytics-beacon"


@dataclass(frozen=True)
class CacheDirective:
    """Cache lifetimes in seconds."""

    max_age: int
    s_max_age: int
    stale_while_revalidate: int
    stale_if_error: int | None = None


CACHE_DIRECTIVES: Mapping[ResourceClass, CacheDirective] = MappingProxyType(
    {
        # 1 hour browser, 1 day CDN, 30 days fallback on origin errors
        ResourceClass.PAGE: CacheDirective(
            max_age=3600,
            s_max_age=86400,
            stale_while_revalidate=604800,
            stale_if_error=2592000,
        ),
        ResourceClass.ASSET: CacheDirective(
            max_age=31536000,
            s_max_age=31536000,
            stale_while_revalidate=31536000,
        ),
        ResourceClass.IMAGE: CacheDirective(
            max_age=2592000,
            s_max_age=2592000,
            stale_while_revalidate=2592000,
        ),
        ResourceClass.API: CacheDirective(
            max_age=300,
            s_max_age=300,
            stale_while_revalidate=600,
        ),
        ResourceClass.ANALYTICS_BEACON: CacheDirective(
            max_age=0,
            s_max_age=0,
            stale_while_revalidate=0,
        ),
    }
)


def classify(content_type: str) -> ResourceClass:
    """Map a Content-Type value to its resource class (API when unrecognized)."""
    value = content_type.lower()
    if "text/html" in value:
        return ResourceClass.PAGE
    if "javascript" in value or "text/css" in value:
        return ResourceClass.ASSET
    if "image/" in value:
        return ResourceClass.IMAGE
    if "json" in value:
        return ResourceClass.API
    return ResourceClass.API


def directive_for(resource_class: ResourceClass) -> CacheDirective:
    return CACHE_DIRECTIVES[resource_class]


def format_cache_control(directive: CacheDirective) -> str:
    """Render a directive as a ``Cache-Control`` header value."""
    parts = [
        "public",
        f"max-age={directive.max_age}",
        f"s-maxage={directive.s_max_age}",
        f"stale-while-revalidate={directive.stale_while_revalidate}",
    ]
    if directive.stale_if_error is not None:
        parts.append(f"stale-if-error={directive.stale_if_error}")
    return ", ".join(parts)


def cache_control_for(content_type: str) -> str:
    return format_cache_control(directive_for(classify(content_type)))


def generate_cache_tags(path: str) -> list[str]:
    """Return CDN cache tags for a request path; ``all-content`` is always last."""
    tags: list[str] = []
    if "/api/" in path:
        tags.append("api")
    elif "/category/" in path:
        tags.extend(("category", "posts"))
    elif "/author/" in path:
        tags.extend(("author", "posts"))
    elif "/tag/" in path:
        tags.extend(("tag", "posts"))
    elif "/search" in path:
        tags.extend(("search", "posts"))
    elif path == "/" or "/page/" in path:
        tags.extend(("homepage", "posts"))
    elif "." in path:
        tags.append("assets")
    tags.append("all-content")
    return tags


def is_static_asset_path(path: str) -> bool:
    return _STATIC_ASSET_RE.search(path) is not None


def edge_cache_control(path: str, method: str = "GET") -> str:
    """Pick the Cache-Control value the edge attaches to a request.

    Static assets get one year immutable, API routes five minutes, pages one
    hour in the browser and one day at the CDN. Non-cacheable methods get the
    analytics-beacon directive.
    """
    if method.upper() not in _CACHEABLE_METHODS:
        return format_cache_control(directive_for(ResourceClass.ANALYTICS_BEACON))
    if is_static_asset_path(path):
        return EDGE_ASSET_CACHE_CONTROL
    if path.startswith("/api/"):
        return EDGE_API_CACHE_CONTROL
    return EDGE_PAGE_CACHE_CONTROL
