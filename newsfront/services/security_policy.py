"""Security policy: CSP, response security headers, nonces and URL checks."""

from __future__ import annotations

import ipaddress
import logging
import secrets
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal
from urllib.parse import urljoin, urlsplit

from newsfront.exceptions import InsecureRandomSourceError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

NONCE_PLACEHOLDER = "'nonce-{NONCE}'"

CSP_POLICY: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "default-src": ("'self'",),
        "script-src": (
            "'self'",
            NONCE_PLACEHOLDER,
            "https://www.googletagmanager.com",
            "https://www.google-analytics.com",
            "https://cdn.jsdelivr.net",
        ),
        "style-src": (
            "'self'",
            "'unsafe-inline'",
            "https://fonts.googleapis.com",
            "https://cdn.jsdelivr.net",
        ),
        "font-src": ("'self'", "https://fonts.gstatic.com", "data:"),
        "img-src": (
            "'self'",
            "data:",
            "https:",
            "https://www.googletagmanager.com",
            "https://www.google-analytics.com",
        ),
        "connect-src": (
            "'self'",
            "https://www.google-analytics.com",
            "https://www.googletagmanager.com",
            "https://region1.google-analytics.com",
        ),
        "frame-src": ("'none'",),
        "object-src": ("'none'",),
        "media-src": ("'self'",),
        "form-action": ("'self'",),
        "frame-ancestors": ("'none'",),
        "base-uri": ("'self'",),
        "upgrade-insecure-requests": (),
    }
)

# Server identification is a generic placeholder so the serving stack is not disclosed.
SECURITY_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "X-XSS-Protection": "1; mode=block",
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "camera=(), microphone=(), geolocation=(self), payment=()",
        "Server": "Apache",
    }
)

_REDIRECT_BASE = "http://localhost"
_LOOPBACK_HOSTNAMES = frozenset({"localhost", "localhost.localdomain"})
_REDACTED_KEYS = frozenset({"password", "token", "secret", "api_key", "apikey", "authorization"})
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
)


def build_csp(policy: Mapping[str, Iterable[str]] = CSP_POLICY, nonce: str | None = None) -> str:
    """Render a CSP header value, directives in policy order.

    The nonce placeholder token is replaced by ``'nonce-<nonce>'`` when a
    nonce is supplied and left as configured otherwise.
    """
    rendered: list[str] = []
    for directive, sources in policy.items():
        tokens = [
            f"'nonce-{nonce}'" if nonce and source == NONCE_PLACEHOLDER else source
            for source in sources
        ]
        rendered.append(f"{directive} {' '.join(tokens)}".strip())
    return "; ".join(rendered)


def csp_policy_for(endpoint: str | None) -> Mapping[str, tuple[str, ...]]:
    """Return ``CSP_POLICY`` with the GraphQL endpoint's origin allowed in connect-src."""
    origin = _origin_of(endpoint) if endpoint else None
    if origin is None or origin in CSP_POLICY["connect-src"]:
        return CSP_POLICY
    policy = dict(CSP_POLICY)
    policy["connect-src"] = (*CSP_POLICY["connect-src"], origin)
    return MappingProxyType(policy)


def _origin_of(url: str) -> str | None:
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"


def generate_nonce(length_bytes: int = 32) -> str:
    """Return ``length_bytes`` of secure random data as lowercase hex.

    Raises InsecureRandomSourceError if the OS has no secure random source.
    """
    try:
        raw = secrets.token_bytes(length_bytes)
    except NotImplementedError as exc:
        msg = "No cryptographically secure random source available for nonce generation"
        raise InsecureRandomSourceError(msg) from exc
    return raw.hex()


def build_security_headers(headers: Mapping[str, str] = SECURITY_HEADERS) -> dict[str, str]:
    """Return a fresh copy of the security header set for one response."""
    return dict(headers)


def is_valid_redirect_url(url: Any, allowed_origins: Iterable[str]) -> bool:
    """Return True when ``url`` may be used as a redirect target.

    Relative URLs resolve against a placeholder base and stay on the current
    origin. Absolute and protocol-relative URLs must match the scheme and
    host of one allowed origin. Anything unparsable is rejected.
    """
    if not isinstance(url, str) or not url.strip():
        return False
    # Browsers treat backslashes as slashes in special-scheme URLs.
    candidate = url.strip().replace("\\", "/")
    try:
        raw = urlsplit(candidate)
        resolved = urlsplit(urljoin(_REDIRECT_BASE, candidate))
        allowed = [urlsplit(origin) for origin in allowed_origins]
    except ValueError:
        return False

    if not allowed:
        return False
    if not raw.scheme and not raw.netloc:
        base = urlsplit(_REDIRECT_BASE)
        return resolved.scheme == base.scheme and resolved.hostname == base.hostname

    if not resolved.hostname:
        return False
    return any(
        resolved.scheme == origin.scheme and resolved.hostname == origin.hostname
        for origin in allowed
        if origin.scheme and origin.hostname
    )


def sanitize_input(text: Any) -> str:
    """Escape the five HTML-significant characters; non-strings yield ``''``."""
    if not isinstance(text, str):
        return ""
    # Ampersand first so later entities are not double-escaped.
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def _is_loopback_host(hostname: str) -> bool:
    candidate = hostname.strip().lower().rstrip(".")
    if candidate in _LOOPBACK_HOSTNAMES or candidate.endswith(".localhost"):
        return True
    try:
        return ipaddress.ip_address(candidate).is_loopback
    except ValueError:
        return False


def validate_api_endpoint(endpoint: str, production: bool = False) -> bool:
    """Return True when ``endpoint`` is usable as the GraphQL endpoint.

    Production requires HTTPS and a non-loopback host.
    """
    try:
        parts = urlsplit(endpoint.strip())
        hostname = parts.hostname
    except ValueError:
        logger.error("API endpoint is not a valid URL")
        return False
    if parts.scheme not in ("http", "https") or not hostname:
        logger.error("API endpoint must be an absolute http(s) URL")
        return False
    if production and parts.scheme != "https":
        logger.error("API endpoint must use HTTPS in production")
        return False
    if production and _is_loopback_host(hostname):
        logger.error("Cannot use a loopback API endpoint in production")
        return False
    return True


def log_security_event(
    event_type: str,
    details: Mapping[str, object],
    severity: Literal["low", "medium", "high", "critical"] = "medium",
) -> None:
    """Log a security-relevant event with sensitive fields redacted."""
    redacted = {
        key: "[REDACTED]" if key.lower() in _REDACTED_KEYS else value
        for key, value in details.items()
    }
    level = logging.ERROR if severity in ("high", "critical") else logging.WARNING
    logger.log(level, "[SECURITY] %s: %s %s", severity.upper(), event_type, redacted)
