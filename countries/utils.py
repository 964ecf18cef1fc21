from datetime import datetime, timezone
from itertools import islice


def get_now():
    """Return current UTC datetime (aware)."""
    return datetime.now(timezone.utc)


def chunked(items, size):
    """Yield lists of at most ``size`` items, preserving order."""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk
