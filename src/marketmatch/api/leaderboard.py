# src/marketmatch/api/leaderboard.py

"""API endpoints for the ranked leaderboard and its live change stream."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketmatch import config
from marketmatch.components.leaderboard import Leaderboard
from marketmatch.db.session import get_session_factory
from marketmatch.realtime import PLAYERS_TABLE, ChangeFeed, Subscription, get_change_feed
from marketmatch.schemas.leaderboard import LeaderboardEntry, LeaderboardView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.get("/", response_model=LeaderboardView)
async def read_leaderboard(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> LeaderboardView:
    """
    Retrieve every player ranked by current portfolio value, highest first.

    Each entry carries the rendered value, rank badge, last-updated date, and
    the percent change since the player's previous value when there is one.
    """
    board = Leaderboard(session_factory)
    rows = await board.refresh()
    return LeaderboardView(
        entries=[LeaderboardEntry.model_validate(row) for row in rows],
        total=len(rows),
    )


def format_sse(event: str, payload: dict) -> str:
    """Encode one Server-Sent Events message."""
    data = json.dumps(payload, separators=(",", ":"))
    return f"event: {event}\ndata: {data}\n\n"


async def event_stream(
    subscription: Subscription,
    heartbeat_seconds: float,
    request: Request | None = None,
) -> AsyncIterator[str]:
    """Yield an SSE message per notification, with comment heartbeats.

    The subscription is released when the client disconnects or the
    generator is closed.
    """
    try:
        yield "retry: 2000\n\n"
        while subscription.active:
            if request is not None and await request.is_disconnected():
                break
            try:
                notification = await asyncio.wait_for(
                    subscription.get(), timeout=heartbeat_seconds
                )
            except asyncio.TimeoutError:
                yield ": ping\n\n"
                continue
            yield format_sse(notification.table, notification.as_dict())
    finally:
        subscription.unsubscribe()
        logger.debug("Leaderboard stream closed")


@router.get("/stream")
async def stream_leaderboard_changes(
    request: Request,
    feed: ChangeFeed = Depends(get_change_feed),
) -> StreamingResponse:
    """
    Stream player changes as Server-Sent Events.

    Each insert, update, or delete on the players table produces one
    `players` event. The payload only signals that something changed;
    clients should re-fetch `GET /leaderboard/` on every event.
    """
    subscription = feed.subscribe(PLAYERS_TABLE)
    return StreamingResponse(
        event_stream(subscription, config.SSE_HEARTBEAT_SECONDS, request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
