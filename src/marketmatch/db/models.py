# src/marketmatch/db/models.py

"""Database models for the Market Match application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Float, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware "now" used for every timestamp the app writes."""
    return datetime.now(timezone.utc)


# ===============================================
# Player: the only table
# ===============================================


class Player(Base):
    """One player's self-reported portfolio value.

    Attributes:
        name: Display name and the natural key used for upserts.
        current_value: Latest reported portfolio value.
        previous_value: The value replaced by the last update; None until the
            player has been updated at least once.
        last_updated: When the submitting client wrote the record.
    """

    __tablename__ = "players"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    current_value: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    previous_value: Mapped[float | None] = mapped_column(
        Float, default=None, nullable=True
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __init__(self, name: str, current_value: float, **kw: Any):
        super().__init__(**kw)
        self.name = name
        self.current_value = current_value

    def __repr__(self) -> str:
        return (
            f"Player(id={self.id!r}, name={self.name!r}, "
            f"current_value={self.current_value!r}, "
            f"previous_value={self.previous_value!r})"
        )
