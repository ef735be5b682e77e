# Overview: Timestamp helpers. The database holds naive UTC; the API speaks ISO-8601 with a trailing Z.

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC now, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_now() -> datetime:
    """Cafeteria wall-clock time (server local); meal periods are read from it."""
    return datetime.now()


def parse_iso_datetime(value: str | None) -> datetime | None:
    """
    "2024-03-04T09:30:00Z" / "...+05:30" / naive (taken as UTC) -> naive UTC.
    Blank input gives None; malformed input raises ValueError.
    """
    text = (value or "").strip()
    if not text:
        return None

    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_utc_z(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"
