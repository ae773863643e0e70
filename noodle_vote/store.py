# counter store interface + in-memory implementation
import abc
import threading
from datetime import datetime, timezone
from typing import Dict, List

import pydantic

from .config import STORE_BACKEND
from .errors import PersistenceReadError
from .logger import get_logger
from .models import Tally, VoteChoice

logger = get_logger("store")


class CounterStore(abc.ABC):
    """
    Sole point of contact with the durable vote counters.

    `increment` must be a single atomic operation on the store side: callers
    never read-modify-write.
    """

    name = "abstract"

    @abc.abstractmethod
    async def read(self) -> List[Tally]:
        """Return every tally row. Raises PersistenceReadError."""

    @abc.abstractmethod
    async def increment(self, choice: VoteChoice) -> None:
        """Add one vote to `choice` and stamp its time. Raises PersistenceWriteError."""

    async def aclose(self) -> None:
        pass


def parse_tallies(rows) -> List[Tally]:
    """
    Validate raw rows coming back from a store.
    Unknown choices, negative counts and duplicate rows are malformed data.
    """
    if not isinstance(rows, list):
        logger.error("Expected a list of tally rows from store, got {}", type(rows).__name__)
        raise PersistenceReadError()

    try:
        tallies = [Tally.model_validate(row) for row in rows]
    except pydantic.ValidationError as e:
        logger.error("Malformed tally rows from store: {}", e)
        raise PersistenceReadError() from e

    seen = set()
    for t in tallies:
        if t.choice in seen:
            logger.error("Duplicate tally row for {}", t.choice.value)
            raise PersistenceReadError()
        seen.add(t.choice)
    return tallies


class InMemoryCounterStore(CounterStore):
    """
    Process-local counters, pre-seeded with one zero row per choice.
    The lock makes increment-and-stamp atomic for concurrent callers.
    """

    name = "memory"

    def __init__(self) -> None:
        seeded_at = datetime.now(timezone.utc)
        self._lock = threading.Lock()
        self._tallies: Dict[VoteChoice, Tally] = {
            choice: Tally(choice=choice, count=0, updated_at=seeded_at)
            for choice in VoteChoice
        }

    async def read(self) -> List[Tally]:
        with self._lock:
            # copies, so callers never see later increments
            return [t.model_copy() for t in self._tallies.values()]

    async def increment(self, choice: VoteChoice) -> None:
        choice = VoteChoice(choice)
        with self._lock:
            current = self._tallies[choice]
            self._tallies[choice] = Tally(
                choice=choice,
                count=current.count + 1,
                updated_at=datetime.now(timezone.utc),
            )


def build_store(backend: str = STORE_BACKEND) -> CounterStore:
    if backend == "memory":
        logger.warning("Using in-memory vote counters; votes are lost on restart")
        return InMemoryCounterStore()
    if backend == "supabase":
        from .supabase import SupabaseCounterStore

        return SupabaseCounterStore.from_config()
    raise RuntimeError(f"Unknown STORE_BACKEND: {backend!r}")
