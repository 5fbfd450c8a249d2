"""Time helpers."""

import time


def now_epoch() -> int:
    """Return the current Unix timestamp in whole seconds."""
    return int(time.time())
