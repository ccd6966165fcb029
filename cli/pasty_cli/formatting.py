from __future__ import annotations

from datetime import datetime, timezone


def format_lifetime(seconds: int) -> str:
    if seconds < 0:
        return "unlimited"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes}m{secs:02d}s"
    if seconds < 86400:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{hours}h{minutes:02d}m"
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    return f"{days}d{hours:02d}h"


def format_created(value: int | None) -> str:
    if value is None:
        return "-"
    dt = datetime.fromtimestamp(value, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
