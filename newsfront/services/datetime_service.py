"""Datetime parsing for CMS timestamps: lax input -> strict output."""

from __future__ import annotations

from datetime import datetime, timezone

import pendulum


def parse_datetime(value: str | datetime, default_tz: str = "UTC") -> datetime:
    """Parse a CMS timestamp into a timezone-aware datetime.

    WordPress reports site-local times without an offset
    (``2026-02-02T22:21:29``); those are interpreted in ``default_tz``.
    Date-only strings become midnight.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            tz = pendulum.timezone(default_tz)
            value = value.replace(tzinfo=tz)  # type: ignore[arg-type]
        return value

    parsed = pendulum.parse(value.strip(), tz=default_tz, strict=False)
    if not isinstance(parsed, pendulum.DateTime):
        # pendulum.parse returns Date for date-only strings
        parsed = pendulum.datetime(
            parsed.year, parsed.month, parsed.day, tz=default_tz  # type: ignore[union-attr]
        )
    return parsed  # type: ignore[return-value]


def parse_optional(value: str | None, default_tz: str = "UTC") -> datetime | None:
    """Parse ``value`` or return None when it is absent or unparsable."""
    if not value:
        return None
    try:
        return parse_datetime(value, default_tz)
    except ValueError:
        # pendulum's ParserError is a ValueError
        return None


def now_utc() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def format_iso(dt: datetime) -> str:
    """Format datetime as ISO 8601 in UTC, e.g. ``2026-02-02T22:21:29+00:00``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat()


def format_date(dt: datetime) -> str:
    """Format as ``YYYY-MM-DD`` in UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date().isoformat()
