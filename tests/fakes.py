from noodle_vote.errors import PersistenceReadError, PersistenceWriteError
from noodle_vote.store import CounterStore


class BrokenStore(CounterStore):
    """Store whose backend is down."""

    name = "broken"

    def __init__(self):
        self.increments = 0

    async def read(self):
        raise PersistenceReadError()

    async def increment(self, choice):
        self.increments += 1
        raise PersistenceWriteError()


class StaticStore(CounterStore):
    """Store returning fixed rows, for aggregation edge cases."""

    name = "static"

    def __init__(self, tallies):
        self.tallies = tallies

    async def read(self):
        return list(self.tallies)

    async def increment(self, choice):
        raise AssertionError("not expected")
