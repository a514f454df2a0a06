"""Dense ranking with a fixed tie-break chain."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from domain.common import RankedRow, ScoredPlayer


def _sort_key(player: ScoredPlayer) -> tuple[float, float, float, int, str]:
    final_points, best_single, average_used, total_count = player.tie_break_key()
    return (-final_points, -best_single, -average_used, -total_count, player.player_id)


def rank_players(players: Iterable[ScoredPlayer]) -> list[tuple[int, ScoredPlayer]]:
    """Order players best-first and assign dense positions.

    Ties on (final points, best single, average used, result count) share a
    position; ``player_id`` only fixes the order inside a tie.
    """
    ordered = sorted(players, key=_sort_key)

    ranked: list[tuple[int, ScoredPlayer]] = []
    position = 0
    previous_key: tuple[float, float, float, int] | None = None
    for player in ordered:
        key = player.tie_break_key()
        if key != previous_key:
            position += 1
            previous_key = key
        ranked.append((position, player))
    return ranked


def select_rows(
    rows: Sequence[RankedRow],
    *,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[RankedRow]:
    """Apply name search and pagination to already-ranked rows."""
    if offset < 0:
        raise ValueError("offset must be >= 0")
    if limit is not None and limit <= 0:
        raise ValueError("limit must be greater than 0")

    selected = list(rows)
    needle = (search or "").strip().lower()
    if needle:
        selected = [row for row in selected if needle in row.name.lower()]

    end = None if limit is None else offset + limit
    return selected[offset:end]


__all__ = ["rank_players", "select_rows"]
