"""Input checks applied before the store is touched."""

from typing import Any

from game_saver.exceptions import InvalidArgumentError


def validate_lease_hours(hours: Any, min_hours: int, max_hours: int) -> int:
    """Return `hours` if it is a whole number within bounds.

    Floats (even 2.0), strings and booleans are rejected rather than coerced.
    """
    if isinstance(hours, bool) or not isinstance(hours, int):
        raise InvalidArgumentError(
            "Hours must be a whole number",
            details={"hours": repr(hours)},
        )
    if hours < min_hours or hours > max_hours:
        raise InvalidArgumentError(
            f"Hours must be between {min_hours} and {max_hours}",
            details={"hours": hours, "min_hours": min_hours, "max_hours": max_hours},
        )
    return hours
