"""Shared value types for leaderboard computation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.leaderboard.bonuses import BonusRule


class ScoringMethod(str, Enum):
    """How a player's point values collapse into a base score."""

    CUMULATIVE = "ALL"
    BEST_X = "BEST_X"


class HighRollerFilter(str, Enum):
    """Which events a scope admits by their high-roller flag."""

    ANY = "any"
    TRUE_ONLY = "true_only"


@dataclass(frozen=True)
class ResultFact:
    """One player's outcome in one event, with event fields denormalized."""

    player_id: str
    event_id: str
    event_date: date | None
    points: float | None = None
    position_of_prize: int | None = None
    prize_amount: float | None = None
    consent_flag: bool = False
    is_high_roller: bool | None = None
    buy_in: float | None = None
    series_id: str | None = None
    festival_id: str | None = None


@dataclass(frozen=True)
class PlayerIdentity:
    """Name fields for one player; ``has_consented`` covers all of their results."""

    player_id: str
    forename: str | None = None
    surname: str | None = None
    display_name: str | None = None
    has_consented: bool = False


@dataclass(frozen=True)
class ScopeDescriptor:
    """Immutable description of the slice of results a leaderboard covers."""

    date_from: date | None
    date_to: date | None
    high_roller_filter: HighRollerFilter = HighRollerFilter.ANY
    max_buy_in: float | None = None
    series_or_festival_ids: frozenset[str] | None = None
    scoring_method: ScoringMethod = ScoringMethod.CUMULATIVE
    cap: int = 0
    bonus_rules: tuple[BonusRule, ...] = ()
    scope_key: str | None = None


@dataclass(frozen=True)
class PlayerAggregate:
    """Per-player rollup of the facts that passed the scope filter."""

    player_id: str
    points: tuple[float, ...]
    events_played: int
    wins: int
    final_tables: int
    top3_count: int
    any_consent: bool
    chronological_wins: tuple[date, ...]
    chronological_outcomes: tuple[bool, ...]
    prize_total: float | None = None

    @property
    def best_single(self) -> float:
        return self.points[0] if self.points else 0.0

    @property
    def points_all(self) -> float:
        return sum(self.points)


@dataclass(frozen=True)
class ScoredPlayer:
    player_id: str
    base_points: float
    bonus_points: float
    final_points: float
    used_count: int
    total_count: int
    lowest_counted_points: float
    best_single: float
    points_all: float
    aggregate: PlayerAggregate = field(repr=False)

    @property
    def average_used(self) -> float:
        if self.used_count == 0:
            return 0.0
        return self.base_points / self.used_count

    @property
    def average_all(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.points_all / self.total_count

    @property
    def top_results(self) -> tuple[float, ...]:
        return self.aggregate.points[: self.used_count]

    def tie_break_key(self) -> tuple[float, float, float, int]:
        """Ranking tuple; larger is better on every axis."""
        return (self.final_points, self.best_single, self.average_used, self.total_count)


@dataclass(frozen=True)
class RankedRow:
    """One line of a computed leaderboard."""

    position: int
    player_id: str
    name: str
    scored: ScoredPlayer
    movement: int = 0

    @property
    def final_points(self) -> float:
        return self.scored.final_points

    @property
    def display_points(self) -> float:
        return round(self.scored.final_points, 2)

    @property
    def base_points(self) -> float:
        return self.scored.base_points

    @property
    def bonus_points(self) -> float:
        return self.scored.bonus_points

    @property
    def used_count(self) -> int:
        return self.scored.used_count

    @property
    def total_count(self) -> int:
        return self.scored.total_count

    @property
    def lowest_counted_points(self) -> float:
        return self.scored.lowest_counted_points

    @property
    def events_played(self) -> int:
        return self.scored.aggregate.events_played

    @property
    def wins(self) -> int:
        return self.scored.aggregate.wins

    @property
    def final_tables(self) -> int:
        return self.scored.aggregate.final_tables

    @property
    def top3_count(self) -> int:
        return self.scored.aggregate.top3_count

    @property
    def prize_total(self) -> float | None:
        return self.scored.aggregate.prize_total

    @property
    def results_display(self) -> str:
        if self.used_count != self.total_count:
            return f"{self.used_count} ({self.total_count})"
        return f"{self.total_count}"

    @property
    def average_display(self) -> str:
        if self.used_count != self.total_count:
            return f"{self.scored.average_used:.2f} ({self.scored.average_all:.2f})"
        return f"{self.scored.average_used:.2f}"


@dataclass(frozen=True)
class SnapshotEntry:
    snapshot_date: date
    scope_key: str
    player_id: str
    position: int
    points: float


__all__ = [
    "HighRollerFilter",
    "PlayerAggregate",
    "PlayerIdentity",
    "RankedRow",
    "ResultFact",
    "ScopeDescriptor",
    "ScoredPlayer",
    "ScoringMethod",
    "SnapshotEntry",
]
