# src/marketmatch/api/player.py

"""API endpoints for submitting and managing players."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketmatch.components.player_form import PlayerForm, SubmissionOutcome
from marketmatch.db.models import Player
from marketmatch.db.session import get_db, get_session_factory
from marketmatch.realtime import ChangeFeed, get_change_feed
from marketmatch.schemas import player as player_schema
from marketmatch.schemas.common import ToastRead
from marketmatch.store import PlayerStore

# Create an APIRouter instance for players
# - prefix="/players": All routes here will be prefixed with /players
# - tags=["Players"]: Groups these endpoints under "Players" in the API docs
router = APIRouter(prefix="/players", tags=["Players"])

# Status code for each way a submission can end. BUSY is absent: every
# request gets a fresh form, so nothing is ever in flight on it.
SUBMISSION_STATUS = {
    SubmissionOutcome.ADDED: status.HTTP_201_CREATED,
    SubmissionOutcome.UPDATED: status.HTTP_200_OK,
    SubmissionOutcome.IGNORED: status.HTTP_200_OK,
    SubmissionOutcome.INVALID: status.HTTP_422_UNPROCESSABLE_ENTITY,
    SubmissionOutcome.FAILED: status.HTTP_502_BAD_GATEWAY,
}


@router.post("/submit", response_model=player_schema.SubmissionResponse)
async def submit_portfolio(
    submission: player_schema.SubmissionRequest,
    response: Response,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    feed: ChangeFeed = Depends(get_change_feed),
) -> player_schema.SubmissionResponse:
    """
    Add a player or update their portfolio value.

    - **name**: The player's name. An existing player with this exact name
      is updated, otherwise a new player is added.
    - **value**: The portfolio value as typed. Must parse as a
      non-negative number.

    Empty fields are ignored without touching the store.
    """
    form = PlayerForm(session_factory, feed)
    form.name = submission.name
    form.value = submission.value

    outcome = await form.submit()
    response.status_code = SUBMISSION_STATUS[outcome]

    player = None
    if outcome in (SubmissionOutcome.ADDED, SubmissionOutcome.UPDATED):
        player = player_schema.PlayerRead.model_validate(form.last_player)

    return player_schema.SubmissionResponse(
        outcome=outcome,
        toasts=[ToastRead.model_validate(toast) for toast in form.notifier.toasts],
        refresh_hint=form.refresh_hint,
        player=player,
    )


@router.get("/{player_id}", response_model=player_schema.PlayerRead)
async def read_player(player_id: int, db: AsyncSession = Depends(get_db)) -> Player:
    """
    Retrieve a single player by their ID.

    Raises:
        404 Not Found: If the player doesn't exist.
    """
    return await PlayerStore(db).get(player_id)


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> None:
    """
    Delete a player by their ID.

    Confirmation is the caller's job; this endpoint deletes immediately.

    Raises:
        404 Not Found: If the player doesn't exist.
    """
    await PlayerStore(db, feed).delete_by_id(player_id)
    return None
