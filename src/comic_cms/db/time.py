"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def year_month(moment: datetime | None = None) -> str:
    """Return the ``YYYY-MM`` bucket for ``moment`` (defaults to now)."""
    return (moment or utcnow()).strftime("%Y-%m")
