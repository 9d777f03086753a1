"""Process-wide GraphQL client for the CMS endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from newsfront.config import Settings
from newsfront.exceptions import (
    ConfigurationError,
    GraphQLResponseError,
    GraphQLTransportError,
)
from newsfront.services.security_policy import validate_api_endpoint

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class GraphQLClient:
    """Thin GraphQL-over-HTTP client bound to a single endpoint.

    Configuration is fixed at construction; the instance is shared by all
    concurrent requests.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._http = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def request(
        self, query: str, variables: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """POST ``query`` and return the ``data`` object.

        Raises GraphQLTransportError for network, HTTP status or decoding
        failures and GraphQLResponseError for GraphQL-level errors.
        """
        payload = {"query": query, "variables": dict(variables or {})}
        try:
            response = await self._http.post(self._endpoint, json=payload)
        except httpx.HTTPError as exc:
            raise GraphQLTransportError(f"GraphQL endpoint unreachable: {exc}") from exc

        if response.status_code >= 400:
            msg = f"GraphQL endpoint returned HTTP {response.status_code}"
            raise GraphQLTransportError(msg)

        try:
            body = response.json()
        except ValueError:
            msg = f"GraphQL endpoint returned non-JSON response (HTTP {response.status_code})"
            raise GraphQLTransportError(msg) from None

        if not isinstance(body, dict):
            raise GraphQLResponseError("GraphQL response is not an object")
        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise GraphQLResponseError(f"GraphQL error: {str(message)[:200]}", errors=errors)
        data = body.get("data")
        if not isinstance(data, dict):
            raise GraphQLResponseError("GraphQL response has no data")
        return data

    async def aclose(self) -> None:
        await self._http.aclose()


_client: GraphQLClient | None = None
_init_error: ConfigurationError | None = None


def create_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GraphQLClient:
    """Build a client for the configured endpoint or raise ConfigurationError."""
    endpoint = (settings.wpgraphql_endpoint or "").strip()
    if not endpoint:
        raise ConfigurationError(
            "WPGRAPHQL_ENDPOINT is not configured. The application cannot start "
            "without a WordPress GraphQL endpoint, e.g. "
            "WPGRAPHQL_ENDPOINT=https://your-site.com/graphql",
            missing_variables=("WPGRAPHQL_ENDPOINT",),
        )
    if not validate_api_endpoint(endpoint, production=settings.is_production):
        raise ConfigurationError(
            f"Invalid WPGRAPHQL_ENDPOINT: {endpoint}. The endpoint must be an absolute "
            "URL; in production it must use HTTPS and must not point at a loopback host."
        )
    return GraphQLClient(
        endpoint,
        timeout=settings.graphql_timeout_seconds,
        transport=transport,
    )


def init_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GraphQLClient:
    """Return the shared client, building it on first use.

    A failed construction is remembered and re-raised on every later call;
    it is never retried within the process.
    """
    global _client, _init_error
    if _client is not None:
        return _client
    if _init_error is not None:
        raise _init_error
    try:
        _client = create_client(settings if settings is not None else Settings(), transport)
    except ConfigurationError as exc:
        _init_error = exc
        logger.critical("GraphQL client initialization failed: %s", exc)
        raise
    logger.info("GraphQL client bound to %s", _client.endpoint)
    return _client


def get_client() -> GraphQLClient:
    return init_client()


async def close_client() -> None:
    """Close the shared client and reset module state."""
    global _client, _init_error
    if _client is not None:
        await _client.aclose()
    _client = None
    _init_error = None
