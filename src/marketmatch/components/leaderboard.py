# src/marketmatch/components/leaderboard.py

"""Live ranked list of players."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketmatch.db.models import Player
from marketmatch.exceptions import MarketMatchError
from marketmatch.formatting import (
    ValueChange,
    format_currency,
    format_date,
    rank_badge,
    value_change,
)
from marketmatch.realtime import PLAYERS_TABLE, ChangeFeed, Subscription
from marketmatch.store import PlayerStore

from .notifications import Notifier

logger = logging.getLogger(__name__)

# Receives the prompt text, returns True to go ahead
ConfirmCallback = Callable[[str], bool | Awaitable[bool]]

DELETE_FAILED_MESSAGE = "Failed to delete player"


def delete_prompt(player_name: str) -> str:
    return (
        f"Are you sure you want to delete {player_name}'s data? "
        "This action cannot be undone. Please only delete your own data."
    )


def _never_confirm(prompt: str) -> bool:
    return False


@dataclass(frozen=True)
class LeaderboardRow:
    """One rendered line of the leaderboard."""

    rank: int
    badge: str
    player_id: int
    name: str
    current_value: float
    formatted_value: str
    last_updated: str
    change: ValueChange | None


def render_rows(players: list[Player]) -> list[LeaderboardRow]:
    """Turn players (already ordered by value) into 1-indexed rows."""
    rows = []
    for index, player in enumerate(players):
        rank = index + 1
        rows.append(
            LeaderboardRow(
                rank=rank,
                badge=rank_badge(rank),
                player_id=player.id,
                name=player.name,
                current_value=player.current_value,
                formatted_value=format_currency(player.current_value),
                last_updated=format_date(player.last_updated),
                change=value_change(player.current_value, player.previous_value),
            )
        )
    return rows


class Leaderboard:
    """Ranked players, re-fetched whenever the players table changes.

    Use as ``async with Leaderboard(...) as board:`` to tie the change
    subscription to the block, or call :meth:`mount` / :meth:`unmount`.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        feed: ChangeFeed | None = None,
        notifier: Notifier | None = None,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.feed = feed
        self.notifier = notifier or Notifier()
        self.confirm = confirm or _never_confirm

        self.rows: list[LeaderboardRow] = []
        self.loading = True
        self.refreshed = asyncio.Event()
        self._subscription: Subscription | None = None
        self._listener: asyncio.Task | None = None

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    async def mount(self) -> None:
        """Subscribe to player changes and load the first page of rows."""
        if self.mounted:
            return
        if self.feed is not None:
            self._subscription = self.feed.subscribe(PLAYERS_TABLE)
            self._listener = asyncio.create_task(self._listen(self._subscription))
        await self.refresh()

    async def unmount(self) -> None:
        """Release the subscription; no further refreshes are triggered."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Leaderboard listener ended with an error")
            self._listener = None

    async def __aenter__(self) -> Leaderboard:
        await self.mount()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.unmount()

    async def refresh(self) -> list[LeaderboardRow]:
        """Fetch every player and re-render.

        On failure the previously rendered rows are kept.
        """
        self.loading = True
        try:
            async with self.session_factory() as session:
                players = await PlayerStore(session).list_by_value()
            self.rows = render_rows(players)
        except MarketMatchError as e:
            logger.error(
                "Leaderboard fetch failed: %s", e.message, extra=e.details, exc_info=True
            )
        finally:
            self.loading = False
            self.refreshed.set()
        return self.rows

    async def delete_player(self, player_id: int, player_name: str) -> bool:
        """Ask for confirmation, then delete the player and re-fetch.

        Returns True only when the player was deleted.
        """
        confirmed = self.confirm(delete_prompt(player_name))
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed:
            return False

        try:
            async with self.session_factory() as session:
                await PlayerStore(session, self.feed).delete_by_id(player_id)
        except MarketMatchError as e:
            logger.error(
                "Failed to delete player: %s", e.message, extra=e.details, exc_info=True
            )
            self.notifier.error(DELETE_FAILED_MESSAGE)
            return False

        self.notifier.success(f"{player_name}'s data removed")
        await self.refresh()
        return True

    async def _listen(self, subscription: Subscription) -> None:
        async for notification in subscription:
            if not subscription.active:
                break
            logger.debug(
                "Refreshing leaderboard after %s",
                notification.event.value,
                extra={"record_id": notification.record_id},
            )
            try:
                await self.refresh()
            except Exception:
                # Keep listening; the next change retries the fetch
                logger.exception("Leaderboard refresh after change failed")
