"""Ordering of weeks within a season."""

import re
from typing import Optional, Sequence

_TRAILING_NUMBER_RE = re.compile(r"(\d+)$")


def week_number(week_id: Optional[str], schedule: Optional[Sequence[str]] = None) -> Optional[int]:
    """Position of week_id in the season, None if it cannot be placed.

    With a schedule (week ids in season order) this is the index in it;
    otherwise the id's trailing number is used ("week-3" -> 3).
    """
    if not isinstance(week_id, str) or not week_id:
        return None
    if schedule is not None:
        try:
            return list(schedule).index(week_id)
        except ValueError:
            return None
    match = _TRAILING_NUMBER_RE.search(week_id)
    return int(match.group(1)) if match else None


def is_before(week_id: str, other_week_id: str, schedule: Optional[Sequence[str]] = None) -> bool:
    """True if week_id comes strictly before other_week_id. Unplaceable weeks never do."""
    number = week_number(week_id, schedule)
    other = week_number(other_week_id, schedule)
    if number is None or other is None:
        return False
    return number < other
