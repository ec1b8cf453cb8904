import math
from datetime import datetime, timezone
from typing import Any

BYTES_PER_MB = 1024 * 1024
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_mb(num_bytes: int) -> str:
    return f"{num_bytes / BYTES_PER_MB:.2f} MB"


def format_memory_value(num_bytes: int, in_mb: bool = False) -> str:
    if in_mb:
        return format_mb(num_bytes)
    return str(int(num_bytes))


def sanitize_fraction(value: Any) -> float:
    """Coerce a utilization reading into a finite float within [0, 1].

    Non-numeric, NaN and infinite readings become 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


def format_percentage(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"


def format_timestamp(dt: datetime) -> str:
    """Render ``dt`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_timestamp(text: str) -> datetime:
    return datetime.strptime(text, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def utc_timestamp() -> str:
    return format_timestamp(datetime.now(timezone.utc))
