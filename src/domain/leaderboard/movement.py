"""Rank movement against stored snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from domain.common import RankedRow, SnapshotEntry


@dataclass(frozen=True)
class RankGain:
    player_id: str
    from_position: int
    to_position: int
    delta: int


def _positions(entries: Iterable[SnapshotEntry]) -> dict[str, int]:
    return {entry.player_id: entry.position for entry in entries}


def apply_movement(
    rows: Sequence[RankedRow],
    prior_entries: Iterable[SnapshotEntry],
) -> list[RankedRow]:
    """Annotate rows with ``prior - current`` position; positive means the player climbed.

    New entrants get 0. Players only present in the prior snapshot are dropped silently.
    """
    prior_positions = _positions(prior_entries)
    annotated: list[RankedRow] = []
    for row in rows:
        prior_position = prior_positions.get(row.player_id)
        movement = 0 if prior_position is None else prior_position - row.position
        annotated.append(replace(row, movement=movement))
    return annotated


def biggest_gainers(
    latest: Iterable[SnapshotEntry],
    prior: Iterable[SnapshotEntry],
    *,
    limit: int = 10,
) -> list[RankGain]:
    """Players who climbed the most between two snapshots of the same scope."""
    if limit <= 0:
        raise ValueError("limit must be greater than 0")

    prior_positions = _positions(prior)
    gains: list[RankGain] = []
    for entry in latest:
        from_position = prior_positions.get(entry.player_id)
        if from_position is None:
            continue
        delta = from_position - entry.position
        if delta <= 0:
            continue
        gains.append(
            RankGain(
                player_id=entry.player_id,
                from_position=from_position,
                to_position=entry.position,
                delta=delta,
            )
        )

    gains.sort(key=lambda gain: (-gain.delta, gain.player_id))
    return gains[:limit]


__all__ = ["RankGain", "apply_movement", "biggest_gainers"]
