"""Human-readable sizes and durations."""

import math

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]


def format_bytes(size: int) -> str:
    """1536 -> '1.5 KB' (binary multiples)."""
    if size <= 0:
        return "0 B"
    idx = 0
    while size >= 1024 ** (idx + 1) and idx < len(_SIZE_UNITS) - 1:
        idx += 1
    value = round(size / (1024 ** idx), 1)
    if value == int(value):
        return f"{int(value)} {_SIZE_UNITS[idx]}"
    return f"{value} {_SIZE_UNITS[idx]}"


def format_duration(seconds: float) -> str:
    """Coarse estimate label, e.g. 'About 3 minutes'."""
    if seconds <= 0:
        return "Instant"
    if seconds < 60:
        return "Less than a minute"
    if seconds < 3600:
        minutes = math.ceil(seconds / 60)
        return f"About {minutes} minute{'s' if minutes != 1 else ''}"
    if seconds < 86400:
        hours = math.ceil(seconds / 3600)
        return f"About {hours} hour{'s' if hours != 1 else ''}"
    days = math.ceil(seconds / 86400)
    return f"About {days} day{'s' if days != 1 else ''}"
