# descript_proxy/utils/time.py
import math
import time
from typing import Any, Optional


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_timestamp(seconds: Any) -> Optional[str]:
    """'HH:MM:SS' for an offset in seconds; None when it isn't a finite number.

    Fractions are floored and negatives clamp to zero. Hours never wrap.
    """
    if not _is_number(seconds) or not math.isfinite(seconds):
        return None
    total = max(0, math.floor(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def elapsed_ms(started: float) -> int:
    """Whole milliseconds since a time.monotonic() mark."""
    return max(0, int((time.monotonic() - started) * 1000))
