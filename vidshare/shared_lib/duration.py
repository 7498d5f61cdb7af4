"""
Free-text video duration parsing.
"""
import re

_CLOCK_RE = re.compile(r"^\s*(?:(\d+):)?(\d{1,2}):(\d{2})\s*$")
_HOURS_RE = re.compile(r"(\d+)\s*h", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d+)\s*m", re.IGNORECASE)


def parse_duration_seconds(duration) -> int:
    """
    Total seconds for a declared duration.

    ``H:MM:SS`` / ``MM:SS`` take precedence, then ``"Nh"`` / ``"Nm"`` free
    text ("1h 20m", "45m"); anything else is 0.
    """
    if not duration or not isinstance(duration, str):
        return 0

    clock = _CLOCK_RE.match(duration)
    if clock:
        hours, minutes, seconds = clock.groups()
        return int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds)

    hours = _HOURS_RE.search(duration)
    minutes = _MINUTES_RE.search(duration)
    if hours or minutes:
        total = 0
        if hours:
            total += int(hours.group(1)) * 3600
        if minutes:
            total += int(minutes.group(1)) * 60
        return total

    return 0
