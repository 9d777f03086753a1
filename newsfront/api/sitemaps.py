"""Sitemap and robots.txt endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from newsfront.api.deps import get_settings
from newsfront.config import Settings
from newsfront.services.sitemap_service import (
    DEFAULT_BASE_URL,
    build_category_sitemap,
    build_news_sitemap,
    build_sitemap,
    render_robots,
)

router = APIRouter(tags=["sitemaps"])

XML_MEDIA_TYPE = "application/xml; charset=utf-8"
SITEMAP_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"


def _base_url(settings: Settings) -> str:
    return settings.site_url or DEFAULT_BASE_URL


def _xml(document: str) -> Response:
    return Response(
        content=document,
        media_type=XML_MEDIA_TYPE,
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap(settings: Annotated[Settings, Depends(get_settings)]) -> Response:
    return _xml(await build_sitemap(_base_url(settings)))


@router.get("/sitemap-news.xml", include_in_schema=False)
async def news_sitemap(settings: Annotated[Settings, Depends(get_settings)]) -> Response:
    return _xml(await build_news_sitemap(_base_url(settings), settings.site_name))


@router.get("/sitemap-categories.xml", include_in_schema=False)
async def category_sitemap(settings: Annotated[Settings, Depends(get_settings)]) -> Response:
    return _xml(await build_category_sitemap(_base_url(settings)))


@router.get("/robots.txt", include_in_schema=False, response_class=PlainTextResponse)
async def robots(settings: Annotated[Settings, Depends(get_settings)]) -> str:
    return render_robots(_base_url(settings))
