# src/marketmatch/schemas/__init__.py

"""Pydantic schemas for API validation and serialization."""

from .common import GameRules, ToastRead
from .leaderboard import LeaderboardEntry, LeaderboardView, ValueChangeRead
from .player import PlayerBase, PlayerRead, SubmissionRequest, SubmissionResponse

__all__ = [
    # Common
    "GameRules",
    "ToastRead",
    # Leaderboard
    "LeaderboardEntry",
    "LeaderboardView",
    "ValueChangeRead",
    # Player
    "PlayerBase",
    "PlayerRead",
    "SubmissionRequest",
    "SubmissionResponse",
]
