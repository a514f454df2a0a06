"""Database adapters for the leaderboard engine."""

from repositories.facts import SqlFactStore, fetch_player_identity, fetch_result_facts
from repositories.snapshots import SqlSnapshotStore, ensure_snapshot_schema

__all__ = [
    "SqlFactStore",
    "SqlSnapshotStore",
    "ensure_snapshot_schema",
    "fetch_player_identity",
    "fetch_result_facts",
]
