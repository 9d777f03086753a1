"""Edge middleware: attach security and caching headers to every response."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from newsfront.exceptions import InsecureRandomSourceError
from newsfront.services.cache_policy import edge_cache_control, generate_cache_tags
from newsfront.services.security_policy import (
    CSP_POLICY,
    build_csp,
    build_security_headers,
    generate_nonce,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeHeaders:
    """Headers computed for one request before it reaches any route."""

    nonce: str
    headers: dict[str, str]
    cache_control: str


def compute_edge_headers(
    path: str,
    method: str,
    csp_policy: Mapping[str, tuple[str, ...]] = CSP_POLICY,
) -> EdgeHeaders:
    """Derive the response headers from the request path and method alone.

    Raises InsecureRandomSourceError when no nonce can be generated.
    """
    nonce = generate_nonce()
    headers = build_security_headers()
    headers["Content-Security-Policy"] = build_csp(csp_policy, nonce)
    headers["Cache-Tag"] = ",".join(generate_cache_tags(path))
    return EdgeHeaders(
        nonce=nonce,
        headers=headers,
        cache_control=edge_cache_control(path, method),
    )


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
        headers={**build_security_headers(), "Cache-Control": "no-store"},
    )


class EdgePolicyMiddleware(BaseHTTPMiddleware):
    """Outermost middleware; never performs content fetches.

    Per request: compute headers (received -> headers-attached), publish the
    CSP nonce on ``request.state.csp_nonce``, forward, then write the headers
    onto the outgoing response. Security headers always win; a route's own
    ``Cache-Control`` is kept. An exception escaping the route becomes a
    hardened 500.
    """

    def __init__(
        self,
        app: ASGIApp,
        csp_policy: Mapping[str, tuple[str, ...]] = CSP_POLICY,
    ) -> None:
        super().__init__(app)
        self._csp_policy = csp_policy

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            edge = compute_edge_headers(request.url.path, request.method, self._csp_policy)
        except InsecureRandomSourceError as exc:
            logger.critical("Refusing %s %s: %s", request.method, request.url.path, exc)
            return _internal_error_response()

        request.state.csp_nonce = edge.nonce
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = _internal_error_response()

        for name, value in edge.headers.items():
            response.headers[name] = value
        response.headers.setdefault("Cache-Control", edge.cache_control)
        return response
