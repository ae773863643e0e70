# per-client vote cooldown, carried in the lastVotedAt cookie
import math
import time
from typing import Optional

from .config import VOTE_COOLDOWN_MS

# epoch millis are 13 digits for the foreseeable future
MAX_MARKER_DIGITS = 20


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_marker(marker: Optional[str]) -> Optional[int]:
    """
    Cookie value -> epoch millis. Anything that is not a plain integer of at
    most MAX_MARKER_DIGITS digits is ignored.
    """
    if not marker:
        return None
    marker = marker.strip()
    if len(marker) > MAX_MARKER_DIGITS:
        return None
    if not (marker.isascii() and marker.isdigit()):
        return None
    return int(marker)


def remaining_seconds(marker: Optional[str], now: int, cooldown_ms: int = VOTE_COOLDOWN_MS) -> int:
    """
    Seconds left before this client may vote again, 0 if it may vote now.
    A marker stamped in the future is capped to one full window.
    """
    last_voted_at = parse_marker(marker)
    if last_voted_at is None:
        return 0

    elapsed = now - last_voted_at
    if elapsed >= cooldown_ms:
        return 0

    remaining = math.ceil((cooldown_ms - elapsed) / 1000)
    return max(1, min(remaining, math.ceil(cooldown_ms / 1000)))


def issue_marker(now: int) -> str:
    return str(now)
