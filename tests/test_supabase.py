import json

import httpx
import pytest

from noodle_vote.errors import PersistenceReadError, PersistenceWriteError
from noodle_vote.models import VoteChoice
from noodle_vote.supabase import SupabaseCounterStore

pytestmark = pytest.mark.anyio

URL = "https://project.supabase.co"
KEY = "anon-key"

ROWS = [
    {"choice": "jjajang", "count": 12, "updated_at": "2025-05-01T10:00:00.123456+00:00"},
    {"choice": "jjamppong", "count": 9, "updated_at": "2025-05-01T10:05:00+00:00"},
]


def make_store(handler):
    return SupabaseCounterStore(URL, KEY, transport=httpx.MockTransport(handler))


async def test_read_selects_votes_table():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=ROWS)

    store = make_store(handler)
    tallies = await store.read()
    await store.aclose()

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/votes"
    assert request.url.params["select"] == "choice,count,updated_at"
    assert request.url.params["order"] == "choice"
    assert request.headers["apikey"] == KEY
    assert request.headers["authorization"] == f"Bearer {KEY}"
    assert [(t.choice, t.count) for t in tallies] == [
        (VoteChoice.JJAJANG, 12),
        (VoteChoice.JJAMPPONG, 9),
    ]


async def test_increment_calls_rpc_function():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(204)

    store = make_store(handler)
    await store.increment(VoteChoice.JJAMPPONG)
    await store.aclose()

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/rest/v1/rpc/increment_vote"
    assert json.loads(request.content) == {"vote_choice": "jjamppong"}


async def test_read_error_status():
    store = make_store(lambda request: httpx.Response(503, json={"message": "down"}))
    with pytest.raises(PersistenceReadError):
        await store.read()


async def test_read_non_json_body():
    store = make_store(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(PersistenceReadError):
        await store.read()


async def test_read_malformed_rows():
    store = make_store(lambda request: httpx.Response(200, json={"choice": "jjajang"}))
    with pytest.raises(PersistenceReadError):
        await store.read()


async def test_read_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PersistenceReadError):
        await make_store(handler).read()


async def test_increment_error_status():
    store = make_store(lambda request: httpx.Response(400, json={"message": "unknown vote choice"}))
    with pytest.raises(PersistenceWriteError):
        await store.increment(VoteChoice.JJAJANG)


async def test_increment_unreachable():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PersistenceWriteError):
        await make_store(handler).increment(VoteChoice.JJAJANG)


async def test_custom_table_and_function():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json=[] if request.method == "GET" else None)

    store = SupabaseCounterStore(
        URL, KEY, table="noodle_votes", function="bump_vote",
        transport=httpx.MockTransport(handler),
    )
    await store.read()
    await store.increment(VoteChoice.JJAJANG)

    assert paths == ["/rest/v1/noodle_votes", "/rest/v1/rpc/bump_vote"]
