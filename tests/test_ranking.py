"""Unit tests for dense ranking and row selection."""

from __future__ import annotations

from datetime import date, timedelta

from domain.common import RankedRow, ResultFact, ScoredPlayer, ScoringMethod
from domain.leaderboard.aggregator import aggregate_facts
from domain.leaderboard.ranking import rank_players, select_rows
from domain.leaderboard.scoring import score_player


def _scored(player_id: str, points: list[float], cap: int = 0) -> ScoredPlayer:
    start = date(2025, 1, 1)
    facts = [
        ResultFact(
            player_id=player_id,
            event_id=f"e{index}",
            event_date=start + timedelta(days=index),
            points=value,
        )
        for index, value in enumerate(points)
    ]
    return score_player(aggregate_facts(facts)[player_id], method=ScoringMethod.BEST_X, cap=cap)


def _positions(players: list[ScoredPlayer]) -> dict[str, int]:
    return {player.player_id: position for position, player in rank_players(players)}


def test_identical_tie_break_tuples_share_a_dense_position() -> None:
    positions = _positions(
        [
            _scored("a", [30.0, 10.0]),
            _scored("b", [20.0, 10.0]),
            _scored("c", [20.0, 10.0]),
            _scored("d", [5.0]),
        ]
    )
    assert positions == {"a": 1, "b": 2, "c": 2, "d": 3}


def test_best_single_breaks_points_tie() -> None:
    positions = _positions([_scored("a", [15.0, 15.0]), _scored("b", [25.0, 5.0])])
    assert positions == {"b": 1, "a": 2}


def test_average_used_breaks_tie_after_best_single() -> None:
    # Same total and best single; fewer results means a higher average.
    positions = _positions(
        [
            _scored("many", [20.0, 5.0, 5.0]),
            _scored("few", [20.0, 10.0]),
        ]
    )
    assert positions == {"few": 1, "many": 2}


def test_result_count_breaks_tie_last() -> None:
    positions = _positions(
        [
            _scored("short", [10.0, 10.0], cap=2),
            _scored("long", [10.0, 10.0, 1.0], cap=2),
        ]
    )
    assert positions == {"long": 1, "short": 2}


def test_positions_have_no_gaps() -> None:
    players = [_scored(f"p{index}", [float(index % 4)]) for index in range(12)]
    positions = sorted(set(_positions(players).values()))
    assert positions == list(range(1, len(positions) + 1))
    assert len(positions) == 4


def test_ranking_is_stable_across_input_order() -> None:
    players = [
        _scored("b", [10.0]),
        _scored("a", [10.0]),
        _scored("c", [12.0]),
    ]
    forward = [player.player_id for _, player in rank_players(players)]
    backward = [player.player_id for _, player in rank_players(list(reversed(players)))]
    assert forward == backward == ["c", "a", "b"]


def test_empty_input_ranks_nothing() -> None:
    assert rank_players([]) == []


def _rows() -> list[RankedRow]:
    names = ["Alice Jones", "Bob Smith", "A. B.", "Alicia Keys"]
    return [
        RankedRow(
            position=index + 1,
            player_id=f"p{index}",
            name=name,
            scored=_scored(f"p{index}", [1.0]),
        )
        for index, name in enumerate(names)
    ]


def test_select_rows_searches_case_insensitively_without_reranking() -> None:
    selected = select_rows(_rows(), search="ali")
    assert [row.name for row in selected] == ["Alice Jones", "Alicia Keys"]
    assert [row.position for row in selected] == [1, 4]


def test_select_rows_paginates() -> None:
    selected = select_rows(_rows(), limit=2, offset=1)
    assert [row.player_id for row in selected] == ["p1", "p2"]
