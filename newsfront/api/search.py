"""Search API endpoint."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Query

from newsfront.gateway.content import scan_posts, search_posts
from newsfront.schemas.content import Post

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=list[Post])
async def search_endpoint(
    q: Annotated[str, Query(max_length=200)] = "",
    mode: Literal["scan", "server"] = "scan",
    first: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[Post]:
    """Search posts.

    ``scan`` matches title, content, excerpt and author name over recent
    posts; ``server`` delegates to the CMS full-text search.
    """
    term = q.strip()
    if not term:
        return []
    if mode == "server":
        return await search_posts(term, first)
    return (await scan_posts(term))[:first]
