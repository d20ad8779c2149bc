# src/marketmatch/schemas/leaderboard.py

"""Leaderboard schemas for the ranked player list."""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ValueChangeRead(BaseModel):
    """Percent change since the player's previous value."""

    percent: float
    direction: str = Field(..., description="'up' or 'down'")

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display(self) -> str:
        return f"{self.percent:+.2f}%"


class LeaderboardEntry(BaseModel):
    """Single entry in the leaderboard.

    Attributes:
        rank: Position in leaderboard (1-indexed)
        badge: "gold", "silver", "bronze" for the top three, else "default"
        formatted_value: Current value as money, e.g. "$105,000.00"
        last_updated: Date of the last submission (YYYY-MM-DD)
        change: Percent change, absent when there is no usable previous value
    """

    rank: int = Field(..., ge=1, description="Position in leaderboard (1-indexed)")
    badge: str
    player_id: int
    name: str
    current_value: float
    formatted_value: str
    last_updated: str
    change: ValueChangeRead | None = None

    model_config = ConfigDict(from_attributes=True)


class LeaderboardView(BaseModel):
    """The full rendered leaderboard."""

    entries: list[LeaderboardEntry]
    total: int = Field(..., description="Number of ranked players")
