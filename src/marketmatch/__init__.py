"""Market Match: a self-reported portfolio leaderboard."""

__version__ = "0.1.0"
