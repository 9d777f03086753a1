"""Category, author and tag API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from newsfront.api.deps import validate_slug
from newsfront.gateway.content import (
    get_author_by_slug,
    get_categories,
    get_posts_by_category_slug,
    get_tag_by_slug,
)
from newsfront.schemas.content import Author, Category, Tag

router = APIRouter(prefix="/api", tags=["taxonomy"])


@router.get("/categories", response_model=list[Category])
async def list_categories_endpoint(
    first: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[Category]:
    return await get_categories(first)


@router.get("/categories/{slug}", response_model=Category)
async def get_category_endpoint(
    slug: Annotated[str, Depends(validate_slug)],
    first: Annotated[int, Query(ge=1, le=100)] = 10,
    after: Annotated[str | None, Query(max_length=500)] = None,
) -> Category:
    """A category with one page of its posts."""
    category = await get_posts_by_category_slug(slug, first, after)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/authors/{slug}", response_model=Author)
async def get_author_endpoint(slug: Annotated[str, Depends(validate_slug)]) -> Author:
    author = await get_author_by_slug(slug)
    if author is None:
        raise HTTPException(status_code=404, detail="Author not found")
    return author


@router.get("/tags/{slug}", response_model=Tag)
async def get_tag_endpoint(slug: Annotated[str, Depends(validate_slug)]) -> Tag:
    tag = await get_tag_by_slug(slug)
    if tag is None:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag
