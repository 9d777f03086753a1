"""Site configuration and redirect endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from newsfront.api.deps import get_settings
from newsfront.config import Settings
from newsfront.schemas.site import SiteConfigResponse
from newsfront.services.env_validation import get_safe_env_vars
from newsfront.services.security_policy import is_valid_redirect_url, log_security_event
from newsfront.services.seo_service import site_metadata

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["site"])


@router.get("/site", response_model=SiteConfigResponse)
async def site_config(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SiteConfigResponse:
    """Configuration that is safe to expose to browser-side code."""
    safe = get_safe_env_vars(settings.env_mapping())
    return SiteConfigResponse(
        site_url=safe.get("SITE_URL"),
        site_title=safe.get("SITE_TITLE"),
        site_description=safe.get("SITE_DESCRIPTION"),
        site_name=safe.get("SITE_NAME"),
        site_copyright=safe.get("SITE_COPYRIGHT"),
        ga_id=safe.get("PUBLIC_GA_ID"),
        ga_debug=safe.get("PUBLIC_GA_DEBUG") == "true",
        seo=site_metadata(settings),
    )


@router.get("/redirect")
async def redirect_endpoint(
    to: Annotated[str, Query(min_length=1, max_length=2000)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RedirectResponse:
    """Redirect to ``to`` only when it stays on an allowed origin."""
    if not is_valid_redirect_url(to, settings.redirect_origins()):
        log_security_event("open_redirect_blocked", {"target": to[:200]}, severity="low")
        raise HTTPException(status_code=400, detail="Redirect target not allowed")
    return RedirectResponse(url=to, status_code=307)
