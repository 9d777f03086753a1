"""SEO metadata objects for the rendering layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from newsfront.schemas.content import SEOMetadata
from newsfront.services.sitemap_service import DEFAULT_BASE_URL, post_url
from newsfront.services.text_service import strip_html, truncate_text

if TYPE_CHECKING:
    from newsfront.config import Settings
    from newsfront.schemas.content import Post


def site_metadata(settings: Settings) -> SEOMetadata:
    return SEOMetadata(
        title=settings.site_title or "",
        description=settings.site_description or "",
        url=settings.site_url or DEFAULT_BASE_URL,
        type="website",
    )


def post_metadata(post: Post, settings: Settings) -> SEOMetadata:
    """Article metadata; the description is the excerpt as plain text."""
    description = truncate_text(strip_html(post.excerpt).strip())
    return SEOMetadata(
        title=post.title,
        description=description or (settings.site_description or ""),
        url=post_url(settings.site_url or DEFAULT_BASE_URL, post),
        image=post.featured_image.source_url if post.featured_image else None,
        type="article",
        author=post.author.name if post.author else None,
        published_date=post.date,
        modified_date=post.modified or post.date,
    )
