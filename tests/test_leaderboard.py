# tests/test_leaderboard.py

"""Tests for the live leaderboard component."""

import asyncio
from datetime import datetime, timezone

import pytest
from marketmatch.components.leaderboard import (
    DELETE_FAILED_MESSAGE,
    Leaderboard,
    delete_prompt,
)
from marketmatch.components.notifications import ToastLevel
from marketmatch.components.player_form import PlayerForm
from marketmatch.exceptions import StoreError
from marketmatch.realtime import (
    PLAYERS_TABLE,
    ChangeEvent,
    ChangeFeed,
    ChangeNotification,
)
from marketmatch.store import PlayerStore
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

NOW = datetime(2026, 12, 10, 12, 0, tzinfo=timezone.utc)

# =============================================================================
# Helper Functions
# =============================================================================


async def seed(session_factory, *players) -> list[int]:
    """Insert (name, current, previous) tuples and return their ids."""
    ids = []
    async with session_factory() as session:
        store = PlayerStore(session)
        for name, current, previous in players:
            player = await store.insert(name=name, current_value=current, last_updated=NOW)
            if previous is not None:
                player = await store.update_by_name(name, previous_value=previous)
            ids.append(player.id)
    return ids


async def wait_for_refresh(board: Leaderboard) -> None:
    await asyncio.wait_for(board.refreshed.wait(), timeout=2)


# =============================================================================
# Rendering
# =============================================================================


@pytest.mark.asyncio
async def test_refresh_ranks_by_value_descending(
    session_factory: async_sessionmaker[AsyncSession],
):
    await seed(
        session_factory,
        ("Low", 90, 100),
        ("Top", 500, None),
        ("Mid", 110, 100),
        ("Fourth", 50, 0),
    )
    board = Leaderboard(session_factory)

    rows = await board.refresh()

    assert [row.name for row in rows] == ["Top", "Mid", "Low", "Fourth"]
    assert [row.rank for row in rows] == [1, 2, 3, 4]
    assert [row.badge for row in rows] == ["gold", "silver", "bronze", "default"]
    values = [row.current_value for row in rows]
    assert values == sorted(values, reverse=True)
    assert board.loading is False


@pytest.mark.asyncio
async def test_row_formatting(session_factory: async_sessionmaker[AsyncSession]):
    await seed(
        session_factory,
        ("Up", 110, 100),
        ("Down", 90, 100),
        ("New", 80, None),
        ("FromZero", 70, 0),
    )
    board = Leaderboard(session_factory)

    rows = {row.name: row for row in await board.refresh()}

    assert rows["Up"].formatted_value == "$110.00"
    assert rows["Up"].change.display == "+10.00%"
    assert rows["Up"].change.direction == "up"
    assert rows["Down"].change.display == "-10.00%"
    assert rows["Down"].change.direction == "down"
    assert rows["New"].change is None
    assert rows["FromZero"].change is None
    assert rows["Up"].last_updated == "2026-12-10"


@pytest.mark.asyncio
async def test_fetch_failure_keeps_previous_rows(
    session_factory: async_sessionmaker[AsyncSession], monkeypatch
):
    await seed(session_factory, ("Alice", 1, None))
    board = Leaderboard(session_factory)
    await board.refresh()

    async def broken_list(self):
        raise StoreError("select")

    monkeypatch.setattr(PlayerStore, "list_by_value", broken_list)
    rows = await board.refresh()

    assert [row.name for row in rows] == ["Alice"]
    assert board.loading is False


# =============================================================================
# Live updates
# =============================================================================


@pytest.mark.asyncio
async def test_mounted_board_refreshes_on_submission(
    session_factory: async_sessionmaker[AsyncSession], feed: ChangeFeed
):
    """The form and board share nothing but the change feed."""
    form = PlayerForm(session_factory, feed)

    async with Leaderboard(session_factory, feed) as board:
        assert board.rows == []
        assert feed.subscriber_count == 1

        board.refreshed.clear()
        form.name, form.value = "Alice", "100000"
        await form.submit()
        await wait_for_refresh(board)

        assert [row.name for row in board.rows] == ["Alice"]
        assert board.rows[0].change is None

        board.refreshed.clear()
        form.name, form.value = "Alice", "105000"
        await form.submit()
        await wait_for_refresh(board)

        assert board.rows[0].current_value == 105000
        assert board.rows[0].change.display == "+5.00%"

    assert feed.subscriber_count == 0


@pytest.mark.asyncio
async def test_unmounted_board_ignores_changes(
    session_factory: async_sessionmaker[AsyncSession], feed: ChangeFeed
):
    board = Leaderboard(session_factory, feed)
    await board.mount()
    assert board.mounted
    await board.unmount()
    assert not board.mounted

    board.refreshed.clear()
    await seed(session_factory, ("Late", 1, None))
    async with session_factory() as session:
        await PlayerStore(session, feed).update_by_name("Late", current_value=2)
    await asyncio.sleep(0.05)

    assert not board.refreshed.is_set()
    assert board.rows == []


@pytest.mark.asyncio
async def test_listener_survives_unexpected_refresh_error(
    session_factory: async_sessionmaker[AsyncSession], feed: ChangeFeed, monkeypatch
):
    """An unexpected error during a live refresh does not stop later updates."""
    real_list = PlayerStore.list_by_value
    calls = 0

    async def flaky_list(self):
        nonlocal calls
        calls += 1
        if calls == 2:
            raise RuntimeError("driver crashed")
        return await real_list(self)

    monkeypatch.setattr(PlayerStore, "list_by_value", flaky_list)
    board = Leaderboard(session_factory, feed)
    await board.mount()

    # 1. The first live refresh blows up outside the store's error type.
    board.refreshed.clear()
    feed.publish(ChangeNotification(PLAYERS_TABLE, ChangeEvent.UPDATE))
    await wait_for_refresh(board)
    assert board.loading is False
    assert board.rows == []

    # 2. The next change still reaches the board.
    board.refreshed.clear()
    await seed(session_factory, ("Alice", 1, None))
    feed.publish(ChangeNotification(PLAYERS_TABLE, ChangeEvent.INSERT))
    await wait_for_refresh(board)
    assert [row.name for row in board.rows] == ["Alice"]

    # 3. Unmounting is still clean.
    await board.unmount()
    assert not board.mounted
    assert feed.subscriber_count == 0


# =============================================================================
# Deletion
# =============================================================================


@pytest.mark.asyncio
async def test_delete_requires_confirmation(
    session_factory: async_sessionmaker[AsyncSession],
):
    (player_id,) = await seed(session_factory, ("Alice", 1, None))
    prompts = []

    def decline(prompt: str) -> bool:
        prompts.append(prompt)
        return False

    board = Leaderboard(session_factory, confirm=decline)
    await board.refresh()

    assert await board.delete_player(player_id, "Alice") is False

    assert prompts == [delete_prompt("Alice")]
    assert "Alice" in prompts[0]
    assert [row.name for row in await board.refresh()] == ["Alice"]
    assert board.notifier.toasts == []


@pytest.mark.asyncio
async def test_confirmed_delete_removes_only_that_player(
    session_factory: async_sessionmaker[AsyncSession], feed: ChangeFeed
):
    alice_id, bob_id = await seed(
        session_factory, ("Alice", 2, None), ("Bob", 1, None)
    )

    async def accept(prompt: str) -> bool:
        return True

    async with Leaderboard(session_factory, feed, confirm=accept) as board:
        assert await board.delete_player(alice_id, "Alice") is True

        assert [row.player_id for row in board.rows] == [bob_id]
        assert board.notifier.last.level == ToastLevel.SUCCESS
        assert board.notifier.last.message == "Alice's data removed"


@pytest.mark.asyncio
async def test_delete_unknown_player_reports_failure(
    session_factory: async_sessionmaker[AsyncSession],
):
    await seed(session_factory, ("Alice", 1, None))
    board = Leaderboard(session_factory, confirm=lambda prompt: True)
    before = await board.refresh()

    assert await board.delete_player(999999, "Ghost") is False

    assert board.notifier.last.level == ToastLevel.ERROR
    assert board.notifier.last.message == DELETE_FAILED_MESSAGE
    assert board.rows == before
    assert [row.name for row in await board.refresh()] == ["Alice"]
