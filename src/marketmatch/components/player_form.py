# src/marketmatch/components/player_form.py

"""Portfolio submission: upsert a player's value by name."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketmatch.db.models import Player, utcnow
from marketmatch.exceptions import (
    InvalidPortfolioValueError,
    MarketMatchError,
    PlayerNameNotFoundError,
)
from marketmatch.formatting import parse_portfolio_value
from marketmatch.realtime import ChangeFeed
from marketmatch.store import PlayerStore

from .notifications import Notifier

logger = logging.getLogger(__name__)

ADDED_MESSAGE = "Player added!"
UPDATED_MESSAGE = "Portfolio updated!"
FAILED_MESSAGE = "Something went wrong!"
INVALID_MESSAGE = "Please enter a valid portfolio value"
REFRESH_HINT = "Please refresh the page to update the leaderboard"


class SubmissionOutcome(str, Enum):
    """What a call to PlayerForm.submit ended up doing."""

    IGNORED = "ignored"  # a field was empty
    BUSY = "busy"  # a previous submission is still in flight
    INVALID = "invalid"  # value did not parse; store untouched
    ADDED = "added"
    UPDATED = "updated"
    FAILED = "failed"  # store call raised


class PlayerForm:
    """Name/value form that inserts new players and updates existing ones.

    Each submission opens its own session. The form keeps no state beyond
    its two fields, the in-flight flag, and whether to show the refresh hint.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        feed: ChangeFeed | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.feed = feed
        self.notifier = notifier or Notifier()
        self.clock = clock

        self.name = ""
        self.value = ""
        self.processing = False
        self.show_refresh_prompt = False
        self.last_player: Player | None = None

    async def submit(self) -> SubmissionOutcome:
        """Validate the fields and write them to the store."""
        if self.processing:
            return SubmissionOutcome.BUSY
        if not self.name or not self.value:
            return SubmissionOutcome.IGNORED

        self.processing = True
        try:
            try:
                numeric_value = self._parse_value()
            except InvalidPortfolioValueError as e:
                logger.warning("Rejected submission: %s", e.message, extra=e.details)
                self.notifier.error(INVALID_MESSAGE)
                return SubmissionOutcome.INVALID

            try:
                outcome = await self._upsert(self.name, numeric_value)
            except MarketMatchError as e:
                logger.error(
                    "Submission failed: %s", e.message, extra=e.details, exc_info=True
                )
                self.notifier.error(FAILED_MESSAGE)
                return SubmissionOutcome.FAILED

            self.show_refresh_prompt = True
            self.name = ""
            self.value = ""
            return outcome
        finally:
            self.processing = False

    @property
    def refresh_hint(self) -> str | None:
        return REFRESH_HINT if self.show_refresh_prompt else None

    def _parse_value(self) -> float:
        try:
            return parse_portfolio_value(self.value)
        except ValueError as e:
            raise InvalidPortfolioValueError(self.value, str(e)) from e

    async def _upsert(self, name: str, numeric_value: float) -> SubmissionOutcome:
        async with self.session_factory() as session:
            store = PlayerStore(session, self.feed)

            try:
                existing = await store.find_by_name(name)
            except PlayerNameNotFoundError:
                existing = None

            if existing is not None:
                self.last_player = await store.update_by_name(
                    name,
                    current_value=numeric_value,
                    previous_value=existing.current_value,
                    last_updated=self.clock(),
                )
                self.notifier.success(UPDATED_MESSAGE)
                return SubmissionOutcome.UPDATED

            self.last_player = await store.insert(
                name=name, current_value=numeric_value, last_updated=self.clock()
            )
            self.notifier.success(ADDED_MESSAGE)
            return SubmissionOutcome.ADDED
