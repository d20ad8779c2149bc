# src/marketmatch/config.py

"""Application settings read from the environment."""

import os

# Game presentation
APP_TITLE = os.getenv("MARKETMATCH_TITLE", "Melloy Market Match")
CURRENCY_SYMBOL = os.getenv("MARKETMATCH_CURRENCY_SYMBOL", "$")
CURRENCY_CODE = os.getenv("MARKETMATCH_CURRENCY", "AUD")
STARTING_VALUE = float(os.getenv("MARKETMATCH_STARTING_VALUE", "100000"))
GAME_PERIOD = os.getenv("MARKETMATCH_GAME_PERIOD", "1 December to 31 December")
RECOMMENDED_APPS = {
    "Delta (iOS)": "https://apps.apple.com/au/app/delta-investment-tracker/id1288676542",
}

# Create tables on startup when no migration step runs ahead of the app
DB_AUTO_CREATE = os.getenv("DB_AUTO_CREATE", "true").lower() == "true"

# Change feed / Server-Sent Events
CHANGE_FEED_QUEUE_SIZE = int(os.getenv("CHANGE_FEED_QUEUE_SIZE", "128"))
SSE_HEARTBEAT_SECONDS = float(os.getenv("SSE_HEARTBEAT_SECONDS", "15"))
