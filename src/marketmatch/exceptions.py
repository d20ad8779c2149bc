# src/marketmatch/exceptions.py

"""Custom exception hierarchy for Market Match.

This module provides a structured exception hierarchy that enables:
1. Proper HTTP status code mapping in API endpoints
2. Detailed error context for logging and debugging
3. A clear split between bad input, missing rows, and store failures
"""

from __future__ import annotations


class MarketMatchError(Exception):
    """Base exception for all Market Match errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional context for logging/debugging
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Resource Not Found Errors (HTTP 404)
# =============================================================================


class ResourceNotFoundError(MarketMatchError):
    """Base class for resource not found errors."""

    pass


class PlayerNotFoundError(ResourceNotFoundError):
    """Raised when a player ID does not exist."""

    def __init__(self, player_id: int) -> None:
        super().__init__(
            message=f"Player with ID {player_id} not found",
            details={"player_id": player_id},
        )


class PlayerNameNotFoundError(ResourceNotFoundError):
    """Raised when a single-row lookup by name matches no player.

    The submission flow treats this as "no existing record" and inserts.
    """

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"Player named '{name}' not found",
            details={"player_name": name},
        )


# =============================================================================
# Validation Errors (HTTP 422)
# =============================================================================


class ValidationError(MarketMatchError):
    """Base class for validation errors."""

    pass


class InvalidPortfolioValueError(ValidationError):
    """Raised when a submitted portfolio value is not a usable number."""

    def __init__(self, raw_value: str, reason: str = "not a number") -> None:
        super().__init__(
            message=f"Invalid portfolio value {raw_value!r}: {reason}",
            details={"raw_value": raw_value, "reason": reason},
        )


# =============================================================================
# Store Errors (HTTP 502)
# =============================================================================


class StoreError(MarketMatchError):
    """Raised when a call against the player store fails.

    Wraps the underlying database exception so that callers only need to
    know about one failure type.
    """

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        details = {"operation": operation}
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(message=f"Player store {operation} failed", details=details)
        self.cause = cause


class DuplicatePlayerNameError(StoreError):
    """Raised when an insert collides with the unique player name."""

    def __init__(self, name: str, cause: Exception | None = None) -> None:
        super().__init__(operation="insert", cause=cause)
        self.message = f"Player with name '{name}' already exists"
        self.details["player_name"] = name
        self.args = (self.message,)
