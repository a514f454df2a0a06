"""Adapter contracts the leaderboard engine depends on."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol, runtime_checkable

from domain.common import PlayerIdentity, ResultFact, SnapshotEntry


@runtime_checkable
class FactStore(Protocol):
    """Read-only access to result, event and player facts."""

    def fetch_result_facts(
        self,
        date_from: date,
        date_to: date,
        *,
        high_roller_only: bool = False,
    ) -> list[ResultFact]: ...

    def fetch_player_identity(self, player_ids: Iterable[str]) -> dict[str, PlayerIdentity]: ...


@runtime_checkable
class SnapshotStore(Protocol):
    """Persistence for dated leaderboard positions."""

    def fetch_latest_snapshot(self, scope_key: str, before_date: date) -> list[SnapshotEntry]: ...

    def fetch_snapshot(self, scope_key: str, snapshot_date: date) -> list[SnapshotEntry]: ...

    def fetch_snapshot_dates(self, scope_key: str, limit: int = 2) -> list[date]: ...

    def upsert_snapshot(
        self,
        scope_key: str,
        snapshot_date: date,
        entries: Sequence[SnapshotEntry],
    ) -> None: ...


__all__ = ["FactStore", "SnapshotStore"]
