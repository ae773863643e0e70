"""Vote and result operations, independent of the HTTP layer.

The cooldown cookie and the clock are passed in explicitly, and the new
cookie value comes back in :class:`VoteAccepted`, so the route only has to
move values between the request/response and these functions.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from .config import VOTE_COOLDOWN_MS
from .cooldown import issue_marker, remaining_seconds
from .errors import PersistenceError, PersistenceWriteError, RateLimited, ValidationError
from .logger import get_logger
from .models import VoteAccepted, VoteChoice, VoteResult, is_valid_choice
from .store import CounterStore

logger = get_logger("voting")

PREVIEW_LENGTH = 50


def _preview(value: Any) -> str:
    """repr() of a client-supplied value, cut to PREVIEW_LENGTH characters."""
    text = repr(value)
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH - 3] + "..."
    return text


async def cast_vote(
    store: CounterStore,
    payload: Any,
    marker: Optional[str],
    now_ms: int,
    cooldown_ms: int = VOTE_COOLDOWN_MS,
) -> VoteAccepted:
    """
    Record one vote.

    Raises RateLimited while the cooldown is active (before touching the
    store), ValidationError for a missing or unknown choice, and
    PersistenceWriteError when the store fails.
    """
    remaining = remaining_seconds(marker, now_ms, cooldown_ms)
    if remaining:
        logger.info("Vote rejected, cooldown active for {}s", remaining)
        raise RateLimited(remaining, cooldown_ms)

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")

    choice = payload.get("choice")
    if choice is None or choice == "":
        raise ValidationError("choice is required.")

    if not is_valid_choice(choice):
        shown = _preview(choice)
        logger.debug("Invalid choice submitted: {}", shown)
        raise ValidationError(
            f"Invalid choice {shown}: expected 'jjajang' or 'jjamppong'."
        )

    choice = VoteChoice(choice)
    try:
        await store.increment(choice)
    except PersistenceError:
        raise
    except Exception as e:
        logger.exception("Unexpected store failure on increment")
        raise PersistenceWriteError() from e

    logger.info("Vote recorded: {}", choice.value)
    return VoteAccepted(choice=choice, marker=issue_marker(now_ms))


async def tally_result(store: CounterStore, now: Optional[datetime] = None) -> VoteResult:
    """
    Aggregate snapshot of both tallies. Raises PersistenceReadError.

    Rows are seeded once per choice; a missing row is logged as a
    configuration error and counted as zero.
    """
    tallies = await store.read()

    counts = {choice: 0 for choice in VoteChoice}
    for t in tallies:
        counts[t.choice] = t.count

    present = {t.choice for t in tallies}
    missing = [c.value for c in VoteChoice if c not in present]
    if missing:
        logger.error(
            "Vote table is missing tally rows for {}; seed it with sql/schema.sql",
            ", ".join(missing),
        )

    if tallies:
        updated_at = max(t.updated_at for t in tallies)
    else:
        updated_at = now or datetime.now(timezone.utc)

    jjajang = counts[VoteChoice.JJAJANG]
    jjamppong = counts[VoteChoice.JJAMPPONG]
    return VoteResult(
        jjajang=jjajang,
        jjamppong=jjamppong,
        total=jjajang + jjamppong,
        updated_at=updated_at,
    )
