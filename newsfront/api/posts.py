"""Post API endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from newsfront.api.deps import get_settings, validate_slug
from newsfront.config import Settings
from newsfront.gateway.content import get_post_by_slug, get_posts, get_related_posts
from newsfront.schemas.content import Page, Post
from newsfront.schemas.site import PostDetailResponse
from newsfront.services.seo_service import post_metadata
from newsfront.services.text_service import calculate_reading_time, strip_html

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])

RELATED_POSTS_COUNT = 3


@router.get("", response_model=Page[Post])
async def list_posts_endpoint(
    first: Annotated[int, Query(ge=1, le=100)] = 10,
    after: Annotated[str | None, Query(max_length=500)] = None,
) -> Page[Post]:
    """One page of posts; pass ``page_info.end_cursor`` as ``after`` for the next."""
    return await get_posts(first, after)


@router.get("/{slug}", response_model=PostDetailResponse)
async def get_post_endpoint(
    slug: Annotated[str, Depends(validate_slug)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PostDetailResponse:
    post = await get_post_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")

    related: list[Post] = []
    if post.categories:
        related = await get_related_posts(post.categories[0].id, post.id, RELATED_POSTS_COUNT)

    return PostDetailResponse(
        post=post,
        reading_time=calculate_reading_time(strip_html(post.content)),
        related_posts=related,
        seo=post_metadata(post, settings),
    )
