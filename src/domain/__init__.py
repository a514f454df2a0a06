"""Leaderboard domain modules."""

from domain.common import (
    HighRollerFilter,
    PlayerIdentity,
    RankedRow,
    ResultFact,
    ScopeDescriptor,
    ScoringMethod,
    SnapshotEntry,
)
from domain.errors import AdapterFailure, InvalidScope, LeaderboardError

__all__ = [
    "AdapterFailure",
    "HighRollerFilter",
    "InvalidScope",
    "LeaderboardError",
    "PlayerIdentity",
    "RankedRow",
    "ResultFact",
    "ScopeDescriptor",
    "ScoringMethod",
    "SnapshotEntry",
]
