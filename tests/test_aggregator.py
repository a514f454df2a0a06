"""Unit tests for per-player aggregation."""

from __future__ import annotations

from datetime import date

import pytest

from domain.common import ResultFact
from domain.leaderboard.aggregator import aggregate_facts, coerce_points


def _fact(player_id: str, event_id: str, day: int, **overrides: object) -> ResultFact:
    values: dict[str, object] = {
        "player_id": player_id,
        "event_id": event_id,
        "event_date": date(2025, 1, day),
    }
    values.update(overrides)
    return ResultFact(**values)  # type: ignore[arg-type]


def test_points_are_sorted_descending_and_absent_points_count_as_zero() -> None:
    aggregates = aggregate_facts(
        [
            _fact("p1", "e1", 1, points=4.0),
            _fact("p1", "e2", 2, points=None),
            _fact("p1", "e3", 3, points=10.0),
        ]
    )
    assert aggregates["p1"].points == (10.0, 4.0, 0.0)
    assert aggregates["p1"].events_played == 3
    assert aggregates["p1"].best_single == pytest.approx(10.0)


def test_coerce_points_handles_non_numeric_values() -> None:
    assert coerce_points("12.5") == pytest.approx(12.5)
    assert coerce_points("n/a") == pytest.approx(0.0)
    assert coerce_points(None) == pytest.approx(0.0)
    assert coerce_points(True) == pytest.approx(0.0)


def test_wins_final_tables_and_podiums() -> None:
    aggregates = aggregate_facts(
        [
            _fact("p1", "e1", 1, position_of_prize=1),
            _fact("p1", "e2", 2, position_of_prize=3),
            _fact("p1", "e3", 3, position_of_prize=9),
            _fact("p1", "e4", 4, position_of_prize=10),
            _fact("p1", "e5", 5, position_of_prize=None),
        ]
    )
    aggregate = aggregates["p1"]
    assert aggregate.wins == 1
    assert aggregate.final_tables == 3
    assert aggregate.top3_count == 2


def test_any_consent_is_logical_or() -> None:
    aggregates = aggregate_facts(
        [
            _fact("p1", "e1", 1, consent_flag=False),
            _fact("p1", "e2", 2, consent_flag=True),
            _fact("p2", "e1", 1, consent_flag=False),
        ]
    )
    assert aggregates["p1"].any_consent is True
    assert aggregates["p2"].any_consent is False


def test_chronological_wins_and_outcomes_follow_event_dates() -> None:
    aggregates = aggregate_facts(
        [
            _fact("p1", "e3", 20, position_of_prize=1),
            _fact("p1", "e1", 5, position_of_prize=1),
            _fact("p1", "e2", 10, position_of_prize=4),
        ]
    )
    aggregate = aggregates["p1"]
    assert aggregate.chronological_wins == (date(2025, 1, 5), date(2025, 1, 20))
    assert aggregate.chronological_outcomes == (True, False, True)


def test_same_day_events_are_ordered_by_event_id() -> None:
    aggregates = aggregate_facts(
        [
            _fact("p1", "b", 7, position_of_prize=2),
            _fact("p1", "a", 7, position_of_prize=1),
        ]
    )
    assert aggregates["p1"].chronological_outcomes == (True, False)


def test_prize_total_sums_known_amounts_only() -> None:
    aggregates = aggregate_facts(
        [
            _fact("p1", "e1", 1, prize_amount=1500.0),
            _fact("p1", "e2", 2, prize_amount=None),
            _fact("p1", "e3", 3, prize_amount=250.5),
            _fact("p2", "e1", 1, prize_amount=None),
        ]
    )
    assert aggregates["p1"].prize_total == pytest.approx(1750.5)
    assert aggregates["p2"].prize_total is None


def test_players_without_facts_or_id_are_absent() -> None:
    aggregates = aggregate_facts([_fact("", "e1", 1, points=5.0), _fact("p2", "e1", 1)])
    assert list(aggregates) == ["p2"]
    assert aggregate_facts([]) == {}
