"""ORM models."""

from models.base import Base
from models.leaderboard_position import LeaderboardPosition

__all__ = [
    "Base",
    "LeaderboardPosition",
]
