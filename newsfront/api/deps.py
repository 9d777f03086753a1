"""Shared API dependencies."""

from __future__ import annotations

import re

from fastapi import HTTPException, Request, status

from newsfront.config import Settings

_SLUG_PATTERN = re.compile(r"^[a-zA-Z0-9_%-]{1,200}$")


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def validate_slug(slug: str) -> str:
    """Reject slugs that cannot name CMS content."""
    if not _SLUG_PATTERN.match(slug):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid slug")
    return slug
