import time
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], int]


def current_unix_time() -> int:
    """Wall-clock time in whole unix seconds (floored)."""
    return int(time.time())


def to_iso_timestamp(unix_seconds: int) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2025-01-01T00:00:00.000Z."""
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")
