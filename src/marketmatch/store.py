# src/marketmatch/store.py

"""The player store: every read and write against the players table.

Components never touch the session directly. They go through PlayerStore,
which wraps database failures as StoreError and publishes a change
notification after each successful commit.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketmatch.db.models import Player
from marketmatch.exceptions import (
    DuplicatePlayerNameError,
    PlayerNameNotFoundError,
    PlayerNotFoundError,
    StoreError,
)
from marketmatch.realtime import (
    PLAYERS_TABLE,
    ChangeEvent,
    ChangeFeed,
    ChangeNotification,
)

logger = logging.getLogger(__name__)

# Columns an update is allowed to touch; id and name are immutable keys.
UPDATABLE_FIELDS = frozenset({"current_value", "previous_value", "last_updated"})


class PlayerStore:
    """Select/insert/update/delete for players, bound to one session."""

    def __init__(self, db: AsyncSession, feed: ChangeFeed | None = None) -> None:
        self.db = db
        self.feed = feed

    async def list_by_value(self) -> list[Player]:
        """All players, highest current value first. Ties are left to the database."""
        query = select(Player).order_by(Player.current_value.desc())
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StoreError("select", e) from e
        return list(result.scalars().all())

    async def get(self, player_id: int) -> Player:
        try:
            player = await self.db.get(Player, player_id)
        except SQLAlchemyError as e:
            raise StoreError("select", e) from e
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    async def find_by_name(self, name: str) -> Player:
        """Return the single player whose name matches exactly.

        Raises:
            PlayerNameNotFoundError: If no player has this name.
            StoreError: If the query fails or matches more than one row.
        """
        query = select(Player).where(Player.name == name)
        try:
            result = await self.db.execute(query)
            # MultipleResultsFound is a SQLAlchemyError too
            player = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError("select", e) from e
        if player is None:
            raise PlayerNameNotFoundError(name)
        return player

    async def insert(
        self, name: str, current_value: float, last_updated: datetime
    ) -> Player:
        """Create a player with no previous value."""
        player = Player(name=name, current_value=current_value)
        player.last_updated = last_updated
        try:
            self.db.add(player)
            await self.db.commit()
            await self.db.refresh(player)
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicatePlayerNameError(name, e) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError("insert", e) from e

        logger.info(
            "Inserted player",
            extra={"player_id": player.id, "current_value": current_value},
        )
        self._notify(ChangeEvent.INSERT, player.id)
        return player

    async def update_by_name(self, name: str, **fields: Any) -> Player:
        """Write ``fields`` onto the player called ``name``.

        Raises:
            PlayerNameNotFoundError: If the player vanished before the update.
            StoreError: If the update fails.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update player field(s): {sorted(unknown)}")

        player = await self.find_by_name(name)
        for key, value in fields.items():
            setattr(player, key, value)

        try:
            self.db.add(player)
            await self.db.commit()
            await self.db.refresh(player)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError("update", e) from e

        logger.info(
            "Updated player",
            extra={"player_id": player.id, "current_value": player.current_value},
        )
        self._notify(ChangeEvent.UPDATE, player.id)
        return player

    async def delete_by_id(self, player_id: int) -> None:
        """Delete one player.

        Raises:
            PlayerNotFoundError: If no row has this id.
            StoreError: If the delete fails.
        """
        player_to_delete = await self.get(player_id)
        try:
            await self.db.delete(player_to_delete)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError("delete", e) from e

        logger.info("Deleted player", extra={"player_id": player_id})
        self._notify(ChangeEvent.DELETE, player_id)

    def _notify(self, event: ChangeEvent, record_id: int) -> None:
        if self.feed is not None:
            self.feed.publish(
                ChangeNotification(table=PLAYERS_TABLE, event=event, record_id=record_id)
            )
