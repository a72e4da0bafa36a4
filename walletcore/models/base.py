"""Shared helpers for document records."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time used for every record timestamp."""
    return datetime.now(timezone.utc)
