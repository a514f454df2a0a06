"""leaderboard_positions table model."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class LeaderboardPosition(Base):
    """One player's dated position in a league snapshot."""

    __tablename__ = "leaderboard_positions"
    __table_args__ = (
        UniqueConstraint(
            "league",
            "snapshot_date",
            "player_id",
            name="uq_leaderboard_positions_league_date_player",
        ),
        CheckConstraint("position >= 1", name="ck_leaderboard_positions_position"),
        Index("idx_leaderboard_positions_league_date", "league", "snapshot_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    league: Mapped[str] = mapped_column(String(64), nullable=False)
    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False)
    player_id: Mapped[str] = mapped_column(String(64), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    points: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
