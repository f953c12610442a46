from datetime import datetime, timedelta, timezone
import threading

_lock = threading.Lock()
_last = None

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def monotonic_now() -> datetime:
    """Return the current UTC time, strictly later than the previous call in this process.

    Timestamps double as sort keys and as the time component of composite ids,
    so two calls in the same microsecond must still be distinct and ordered.
    """
    global _last
    with _lock:
        now = utc_now()
        if _last is not None and now <= _last:
            now = _last + timedelta(microseconds=1)
        _last = now
    return now

def monotonic_timestamp() -> str:
    """ISO-8601 form of monotonic_now() with microsecond precision."""
    return monotonic_now().isoformat(timespec='microseconds')
