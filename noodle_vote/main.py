from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import APP_ENV, COOKIE_SECURE, COOLDOWN_COOKIE, HOST, PORT, VOTE_COOLDOWN_MS
from .cooldown import now_ms
from .errors import PersistenceReadError, RateLimited, VoteError
from .logger import get_logger
from .models import ResultFailure, VoteAck, VoteRejected
from .store import CounterStore, build_store
from .voting import cast_vote, tally_result

logger = get_logger("main")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one store (and its HTTP client) per process
    app.state.store = build_store()
    logger.info("Vote service starting ({}, store={})", APP_ENV, app.state.store.name)
    yield
    await app.state.store.aclose()


app = FastAPI(
    title="Jjajang vs Jjamppong Vote",
    lifespan=lifespan,
)


def get_store(request: Request) -> CounterStore:
    return request.app.state.store


def get_clock() -> Callable[[], int]:
    return now_ms


async def _json_body(request: Request):
    """
    Parsed JSON body, or None when it is empty or not JSON.
    cast_vote turns a non-object payload into a 400 after the cooldown check.
    """
    try:
        return await request.json()
    except ValueError:
        return None


def _rejection(err: VoteError) -> JSONResponse:
    if isinstance(err, RateLimited):
        body = VoteRejected(
            message=err.message,
            remaining_seconds=err.remaining_seconds,
            cooldown_ms=err.cooldown_ms,
        )
    else:
        body = VoteRejected(message=err.message)
    return JSONResponse(
        body.model_dump(by_alias=True, exclude_none=True),
        status_code=err.status_code,
    )


@app.post("/vote")
async def vote(
    request: Request,
    store: CounterStore = Depends(get_store),
    clock: Callable[[], int] = Depends(get_clock),
):
    marker = request.cookies.get(COOLDOWN_COOKIE)
    try:
        payload = await _json_body(request)
        accepted = await cast_vote(store, payload, marker, clock())
    except VoteError as e:
        return _rejection(e)
    except Exception:
        logger.exception("Vote API error")
        return _rejection(VoteError())

    response = JSONResponse(VoteAck().model_dump(), status_code=200)
    response.set_cookie(
        COOLDOWN_COOKIE,
        accepted.marker,
        max_age=VOTE_COOLDOWN_MS // 1000,
        path="/",
        secure=COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return response


@app.options("/vote")
def vote_options():
    return JSONResponse({}, headers={"Allow": "POST, OPTIONS"})


def _result_failure(message: str) -> JSONResponse:
    body = ResultFailure(
        jjajang=0,
        jjamppong=0,
        total=0,
        updated_at=datetime.now(timezone.utc),
        error=message,
    )
    return JSONResponse(
        body.model_dump(mode="json", by_alias=True),
        status_code=500,
        headers=NO_CACHE_HEADERS,
    )


@app.get("/result")
async def result(store: CounterStore = Depends(get_store)):
    try:
        snapshot = await tally_result(store)
    except PersistenceReadError as e:
        # already logged by the store
        return _result_failure(e.message)
    except Exception:
        logger.exception("Result API error")
        return _result_failure(PersistenceReadError.message)

    return JSONResponse(
        snapshot.model_dump(mode="json", by_alias=True),
        headers=NO_CACHE_HEADERS,
    )


@app.options("/result")
def result_options():
    return JSONResponse({}, headers={"Allow": "GET, OPTIONS"})


@app.get("/health")
def health(store: CounterStore = Depends(get_store)):
    return {"ok": True, "store": store.name}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("noodle_vote.main:app", host=HOST, port=PORT, log_level="info")
