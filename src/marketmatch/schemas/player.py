# src/marketmatch/schemas/player.py

"""Pydantic schemas for the Player resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from marketmatch.components.player_form import SubmissionOutcome

from .common import ToastRead


# ===============================================
# Base Schema: Defines shared attributes
# ===============================================
class PlayerBase(BaseModel):
    """Shared properties for a player."""

    name: str


# ===============================================
# Read Schema: Defines attributes for returning data
# ===============================================
class PlayerRead(PlayerBase):
    """Properties to return to the client."""

    id: int
    current_value: float
    previous_value: float | None = None
    last_updated: datetime

    # Enable ORM mode for this schema
    model_config = ConfigDict(from_attributes=True)


# ===============================================
# Submission Schemas: the portfolio form
# ===============================================
class SubmissionRequest(BaseModel):
    """Raw form fields.

    Both are free text; the value is parsed server-side so that a bad
    number is reported the same way the form reports it.
    """

    name: str = Field("", description="Player name, the upsert key")
    value: str = Field("", description="Portfolio value as typed")


class SubmissionResponse(BaseModel):
    """Result of a form submission."""

    outcome: SubmissionOutcome
    toasts: list[ToastRead] = Field(default_factory=list)
    refresh_hint: str | None = None
    player: PlayerRead | None = None
