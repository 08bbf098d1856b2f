"""ISO-8601 timestamp helpers (millisecond precision, UTC)."""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time as e.g. ``2025-11-03T09:39:31.123Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
