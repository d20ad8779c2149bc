"""Create players table

Revision ID: 20261019_players
Revises:
Create Date: 2026-10-19

Creates the single players table. Names are unique so that two first-time
submissions for the same name cannot both insert.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_players"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create players with a unique name and an index on current_value."""
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=False),
        sa.Column("previous_value", sa.Float(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_players_current_value", "players", ["current_value"])


def downgrade() -> None:
    """Drop the players table."""
    op.drop_index("ix_players_current_value", "players")
    op.drop_table("players")
