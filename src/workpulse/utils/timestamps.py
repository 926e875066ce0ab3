"""Timestamp normalization."""

from datetime import datetime, timezone


def to_utc(moment: datetime) -> datetime:
    """Normalize a timestamp to aware UTC.

    Naive timestamps are assumed to already be UTC, which is how the
    response store writes them.

    Args:
        moment: Timestamp to normalize

    Returns:
        datetime: Timezone-aware UTC timestamp
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
