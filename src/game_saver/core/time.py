"""UTC time helpers.

SQLite hands back naive datetimes even when aware ones were written, so
every timestamp read from the store goes through `ensure_utc` before it is
compared with the current time.
"""

import math
from datetime import UTC, datetime
from typing import overload


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


@overload
def ensure_utc(value: datetime) -> datetime: ...
@overload
def ensure_utc(value: None) -> None: ...
def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def seconds_until(moment: datetime, now: datetime) -> int:
    """Whole seconds from `now` until `moment`, floored at zero."""
    remaining = (ensure_utc(moment) - ensure_utc(now)).total_seconds()
    return max(0, math.floor(remaining))
