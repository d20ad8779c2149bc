# src/marketmatch/schemas/common.py

"""Common Pydantic schemas used across multiple resources."""

from pydantic import BaseModel, ConfigDict, Field

from marketmatch.components.notifications import ToastLevel


class ToastRead(BaseModel):
    """A user notification raised while handling the request.

    Attributes:
        level: "success" or "error"
        message: Text to show the user
    """

    level: ToastLevel
    message: str

    model_config = ConfigDict(from_attributes=True)


class GameRules(BaseModel):
    """The "how to play" overlay content."""

    title: str
    game_period: str
    starting_value: float = Field(..., ge=0, description="Starting portfolio value")
    currency: str = Field(..., description="Currency the portfolio is valued in")
    trade_costs_included: bool = False
    goal: str
    steps: list[str]
    recommended_apps: dict[str, str] = Field(default_factory=dict)
