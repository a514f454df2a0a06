"""Group scoped result facts into per-player aggregates."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from domain.common import PlayerAggregate, ResultFact

FINAL_TABLE_MAX_POSITION = 9
PODIUM_MAX_POSITION = 3


def coerce_points(value: object) -> float:
    """Absent or non-numeric point values count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


def _chronological_key(fact: ResultFact) -> tuple[date, str]:
    # Same-day events fall back to event_id order.
    return (fact.event_date or date.min, str(fact.event_id))


def aggregate_player(player_id: str, facts: list[ResultFact]) -> PlayerAggregate:
    """Build one player's aggregate from their qualifying facts."""
    points = sorted((coerce_points(fact.points) for fact in facts), reverse=True)
    chronological = sorted(facts, key=_chronological_key)
    outcomes = tuple(fact.position_of_prize == 1 for fact in chronological)
    wins = tuple(
        fact.event_date
        for fact in chronological
        if fact.position_of_prize == 1 and fact.event_date is not None
    )

    prizes = [float(fact.prize_amount) for fact in facts if fact.prize_amount is not None]

    return PlayerAggregate(
        player_id=player_id,
        points=tuple(points),
        events_played=len(facts),
        wins=sum(1 for outcome in outcomes if outcome),
        final_tables=sum(
            1
            for fact in facts
            if fact.position_of_prize is not None
            and fact.position_of_prize <= FINAL_TABLE_MAX_POSITION
        ),
        top3_count=sum(
            1
            for fact in facts
            if fact.position_of_prize is not None and fact.position_of_prize <= PODIUM_MAX_POSITION
        ),
        any_consent=any(fact.consent_flag for fact in facts),
        chronological_wins=wins,
        chronological_outcomes=outcomes,
        prize_total=sum(prizes) if prizes else None,
    )


def aggregate_facts(facts: Iterable[ResultFact]) -> dict[str, PlayerAggregate]:
    """Group facts by player; players without an id or without facts are never emitted."""
    by_player: dict[str, list[ResultFact]] = defaultdict(list)
    for fact in facts:
        if not fact.player_id:
            continue
        by_player[fact.player_id].append(fact)

    return {
        player_id: aggregate_player(player_id, player_facts)
        for player_id, player_facts in sorted(by_player.items())
    }


__all__ = [
    "FINAL_TABLE_MAX_POSITION",
    "PODIUM_MAX_POSITION",
    "aggregate_facts",
    "aggregate_player",
    "coerce_points",
]
