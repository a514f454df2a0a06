"""Turn player aggregates into scores under a scope's scoring method."""

from __future__ import annotations

from collections.abc import Iterable

from domain.common import PlayerAggregate, ScopeDescriptor, ScoredPlayer, ScoringMethod
from domain.leaderboard.bonuses import BonusContext, BonusRule, evaluate_bonuses


def effective_method(method: ScoringMethod, cap: int) -> ScoringMethod:
    """BEST_X with a non-positive cap degrades to cumulative scoring."""
    if method is ScoringMethod.BEST_X and cap <= 0:
        return ScoringMethod.CUMULATIVE
    return method


def score_player(
    aggregate: PlayerAggregate,
    *,
    method: ScoringMethod,
    cap: int = 0,
    bonus_rules: tuple[BonusRule, ...] = (),
) -> ScoredPlayer:
    """Score one player; ``aggregate.points`` is already sorted descending."""
    points = aggregate.points
    total_count = len(points)
    method = effective_method(method, cap)

    if method is ScoringMethod.BEST_X:
        used_count = min(cap, total_count)
    else:
        used_count = total_count

    base_points = sum(points[:used_count], 0.0)
    lowest_counted = points[used_count - 1] if used_count > 0 else 0.0

    bonus_points = evaluate_bonuses(
        bonus_rules,
        aggregate,
        BonusContext(method=method, used_count=used_count, total_count=total_count),
    )

    return ScoredPlayer(
        player_id=aggregate.player_id,
        base_points=base_points,
        bonus_points=bonus_points,
        final_points=base_points + bonus_points,
        used_count=used_count,
        total_count=total_count,
        lowest_counted_points=lowest_counted,
        best_single=aggregate.best_single,
        points_all=aggregate.points_all,
        aggregate=aggregate,
    )


def score_players(
    aggregates: Iterable[PlayerAggregate],
    scope: ScopeDescriptor,
) -> list[ScoredPlayer]:
    return [
        score_player(
            aggregate,
            method=scope.scoring_method,
            cap=scope.cap,
            bonus_rules=scope.bonus_rules,
        )
        for aggregate in aggregates
    ]


__all__ = ["effective_method", "score_player", "score_players"]
