# Supabase (PostgREST) counter store
from typing import List, Optional

import httpx

from .config import (
    INCREMENT_FUNCTION,
    SUPABASE_ANON_KEY,
    SUPABASE_TIMEOUT,
    SUPABASE_URL,
    VOTES_TABLE,
)
from .errors import PersistenceReadError, PersistenceWriteError
from .logger import get_logger
from .models import Tally, VoteChoice
from .store import CounterStore, parse_tallies

logger = get_logger("supabase")


class SupabaseCounterStore(CounterStore):
    """
    Tallies live in the `votes` table (choice, count, updated_at).
    Increments go through the `increment_vote` SQL function, which bumps the
    count and stamps updated_at in one statement (see sql/schema.sql).
    """

    name = "supabase"

    def __init__(
        self,
        url: str,
        key: str,
        table: str = VOTES_TABLE,
        function: str = INCREMENT_FUNCTION,
        timeout: float = SUPABASE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not url or not key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for the supabase store")

        self.table = table
        self.function = function
        self.client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls) -> "SupabaseCounterStore":
        return cls(SUPABASE_URL, SUPABASE_ANON_KEY)

    async def read(self) -> List[Tally]:
        try:
            resp = await self.client.get(
                f"/{self.table}",
                params={"select": "choice,count,updated_at", "order": "choice"},
            )
            resp.raise_for_status()
            rows = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error reading votes: {}", e)
            raise PersistenceReadError() from e

        return parse_tallies(rows)

    async def increment(self, choice: VoteChoice) -> None:
        choice = VoteChoice(choice)
        try:
            resp = await self.client.post(
                f"/rpc/{self.function}",
                json={"vote_choice": choice.value},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Error incrementing vote for {}: {}", choice.value, e)
            raise PersistenceWriteError() from e

    async def aclose(self) -> None:
        await self.client.aclose()
