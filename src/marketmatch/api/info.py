# src/marketmatch/api/info.py

"""Game information shown in the "How to Play" overlay."""

from fastapi import APIRouter

from marketmatch import config
from marketmatch.schemas.common import GameRules

router = APIRouter(tags=["Info"])


@router.get("/how-to-play", response_model=GameRules)
async def how_to_play() -> GameRules:
    """Describe the game conditions and how to take part."""
    return GameRules(
        title=config.APP_TITLE,
        game_period=config.GAME_PERIOD,
        starting_value=config.STARTING_VALUE,
        currency=config.CURRENCY_CODE,
        trade_costs_included=False,
        goal="Maximize portfolio value by end of period",
        steps=[
            "Track your total portfolio value in your chosen trading app",
            "Enter your name and current portfolio value in the form",
            "Compete with others on the leaderboard!",
        ],
        recommended_apps=dict(config.RECOMMENDED_APPS),
    )
