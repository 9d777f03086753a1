"""Site-level and aggregate response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from newsfront.schemas.content import Post, SEOMetadata


class PostDetailResponse(BaseModel):
    """A post with everything the article page renders around it."""

    post: Post
    reading_time: int = Field(ge=1)
    related_posts: list[Post] = Field(default_factory=list)
    seo: SEOMetadata


class SiteConfigResponse(BaseModel):
    """Public site configuration for browser-side snippets."""

    site_url: str | None = None
    site_title: str | None = None
    site_description: str | None = None
    site_name: str | None = None
    site_copyright: str | None = None
    ga_id: str | None = None
    ga_debug: bool = False
    seo: SEOMetadata
