"""Date-time helpers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime, matching the DB columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_short(value: datetime) -> str:
    """Render a ledger timestamp the way the history list shows it (e.g. ``Jul 28 14:05``)."""

    return value.strftime("%b %d %H:%M")
