import os

# config is read at import time
os.environ["APP_ENV"] = "test"
os.environ["STORE_BACKEND"] = "memory"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from noodle_vote.main import app, get_clock, get_store
from noodle_vote.store import InMemoryCounterStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return InMemoryCounterStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def frozen_clock():
    """Pin the vote endpoint's clock; returns a setter."""
    state = {"now": 1_700_000_000_000}

    def set_now(value):
        state["now"] = value

    app.dependency_overrides[get_clock] = lambda: (lambda: state["now"])
    yield set_now
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def error_logs():
    """ERROR-and-above loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="ERROR")
    yield records
    logger.remove(handler_id)
