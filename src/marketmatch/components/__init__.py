# src/marketmatch/components/__init__.py

"""The form and leaderboard that make up the game page."""

from .leaderboard import Leaderboard, LeaderboardRow, render_rows
from .notifications import Notifier, Toast, ToastLevel
from .player_form import PlayerForm, SubmissionOutcome

__all__ = [
    "Leaderboard",
    "LeaderboardRow",
    "Notifier",
    "PlayerForm",
    "SubmissionOutcome",
    "Toast",
    "ToastLevel",
    "render_rows",
]
