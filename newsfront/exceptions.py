"""Application-level exception types.

Convention:
- ``ConfigurationError``: fatal startup condition (missing or invalid
  configuration, unusable GraphQL endpoint). Never recovered; the process
  refuses to start.
- ``GatewayError``: any failure talking to the CMS. Always caught at the
  content gateway boundary and converted into an empty-but-valid result.
- ``InternalServerError``: for errors whose details must never reach clients.
  The global handler logs the full message at ERROR and returns a generic
  "Internal server error" (500) to the client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from newsfront.services.env_validation import EnvError


class ConfigurationError(Exception):
    """Raised when required process configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        errors: Sequence[EnvError] = (),
        missing_variables: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.errors = tuple(errors)
        self.missing_variables = tuple(missing_variables)


class GatewayError(Exception):
    """Base class for failures talking to the GraphQL endpoint."""


class GraphQLTransportError(GatewayError):
    """Raised when the endpoint is unreachable or returns a non-GraphQL response."""


class GraphQLResponseError(GatewayError):
    """Raised when the endpoint answers with GraphQL ``errors`` or without ``data``."""

    def __init__(self, message: str, errors: Sequence[object] = ()) -> None:
        super().__init__(message)
        self.errors = tuple(errors)


class InternalServerError(Exception):
    """Raised for internal errors whose details must not be exposed to clients.

    The global exception handler in ``newsfront/main.py`` catches this, logs
    the full message server-side, and returns HTTP 500 with a generic
    ``"Internal server error"`` detail.
    """


class InsecureRandomSourceError(InternalServerError):
    """Raised when no cryptographically secure random source is available."""
