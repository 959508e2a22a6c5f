"""Course duration and progress arithmetic shared by the profile workflow."""

import math
import re
from typing import Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_duration_seconds(value: Optional[str]) -> int:
    """
    Read a lecture's stored duration as whole seconds.

    The stored value is free text from the media probe: "754", "754.21",
    "" or None. Only the leading integer counts; anything unparsable is 0.
    """
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def convert_seconds_to_duration(total_seconds: int) -> str:
    """
    Human-readable duration: "2h 5m", "5m 30s" or "42s".

    Hours drop the seconds; below one hour minutes keep them.
    """
    total_seconds = max(int(total_seconds), 0)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def compute_progress_percentage(completed: int, total: int) -> float:
    """
    completed / total * 100, rounded half-up to two decimals.

    A course without lectures counts as fully complete (100), whatever the
    completed count says.
    """
    if total == 0:
        return 100.0
    raw = completed / total * 100
    return math.floor(raw * 100 + 0.5) / 100
