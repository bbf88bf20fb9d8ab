import time

from datetime import (
    datetime,
    timedelta,
    timezone
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_timestamp() -> int:
    """Milliseconds since the epoch. Every expiry in the package is compared against this."""
    return int(time.time() * 1000)


def to_iso(timestamp_ms: int) -> str:
    return (EPOCH + timedelta(milliseconds=timestamp_ms))\
            .isoformat(timespec="milliseconds")\
            .replace("+00:00", "Z")
