"""Wall clock used by the use cases; injectable for tests."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
