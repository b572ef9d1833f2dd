"""
Time helpers.

All stored timestamps are naive UTC. SQLite drops tzinfo on DateTime columns,
so keeping everything naive avoids comparing aware and naive values.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
