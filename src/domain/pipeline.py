"""Leaderboard service: the entry point that wires adapters to the computation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from domain.common import HighRollerFilter, RankedRow, ScopeDescriptor, SnapshotEntry
from domain.errors import InvalidScope
from domain.leaderboard.aggregator import aggregate_facts
from domain.leaderboard.config import LeagueConfig
from domain.leaderboard.consent import display_name
from domain.leaderboard.movement import RankGain, apply_movement, biggest_gainers
from domain.leaderboard.ranking import rank_players
from domain.leaderboard.scope import filter_facts, validate_scope
from domain.leaderboard.scoring import score_players
from domain.protocol import FactStore, SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotSummary:
    """Outcome for one league snapshot."""

    scope_key: str
    snapshot_date: date
    ranked_rows: int
    saved_rows: int


class LeaderboardService:
    """Compute standings for a scope and persist dated snapshots of them."""

    def __init__(self, fact_store: FactStore, snapshot_store: SnapshotStore) -> None:
        self.fact_store = fact_store
        self.snapshot_store = snapshot_store

    def compute_standings(
        self,
        scope: ScopeDescriptor,
        as_of: date,
        *,
        with_movement: bool = False,
    ) -> list[RankedRow]:
        """Filter, aggregate, score and rank the facts of one scope.

        Movement compares against the latest snapshot of ``scope.scope_key``
        dated strictly before ``as_of``.
        """
        validate_scope(scope)
        if with_movement and not scope.scope_key:
            raise InvalidScope("with_movement requires a scope_key")

        assert scope.date_from is not None and scope.date_to is not None
        facts = self.fact_store.fetch_result_facts(
            scope.date_from,
            scope.date_to,
            high_roller_only=scope.high_roller_filter is HighRollerFilter.TRUE_ONLY,
        )
        scoped_facts = filter_facts(facts, scope)
        logger.debug(
            "scope=%s fetched_facts=%d scoped_facts=%d",
            scope.scope_key,
            len(facts),
            len(scoped_facts),
        )
        if not scoped_facts:
            return []

        aggregates = aggregate_facts(scoped_facts)
        identities = self.fact_store.fetch_player_identity(list(aggregates))

        rows = [
            RankedRow(
                position=position,
                player_id=player.player_id,
                name=display_name(
                    identities.get(player.player_id),
                    player.aggregate.any_consent,
                ),
                scored=player,
            )
            for position, player in rank_players(score_players(aggregates.values(), scope))
        ]
        logger.debug("scope=%s ranked_rows=%d", scope.scope_key, len(rows))

        if with_movement:
            assert scope.scope_key is not None
            prior = self.snapshot_store.fetch_latest_snapshot(scope.scope_key, as_of)
            rows = apply_movement(rows, prior)

        return rows

    def persist_snapshot(self, scope_key: str, as_of: date, rows: Sequence[RankedRow]) -> int:
        """Replace the snapshot for (scope_key, as_of) with ``rows``; returns rows saved.

        An empty row set never touches stored history.
        """
        if not scope_key:
            raise InvalidScope("persist_snapshot requires a scope_key")

        entries = [
            SnapshotEntry(
                snapshot_date=as_of,
                scope_key=scope_key,
                player_id=row.player_id,
                position=row.position,
                points=row.display_points,
            )
            for row in rows
            if row.player_id
        ]
        if not entries:
            logger.warning(
                "Snapshot skipped for scope=%s date=%s: no identifiable rows",
                scope_key,
                as_of.isoformat(),
            )
            return 0

        self.snapshot_store.upsert_snapshot(scope_key, as_of, entries)
        logger.info(
            "Snapshot saved for scope=%s date=%s rows=%d",
            scope_key,
            as_of.isoformat(),
            len(entries),
        )
        return len(entries)

    def snapshot_leagues(
        self,
        leagues: Iterable[LeagueConfig],
        as_of: date,
        *,
        echo: Callable[[str], None] | None = None,
    ) -> list[SnapshotSummary]:
        """Compute and persist the standings of every league for one date."""
        summaries: list[SnapshotSummary] = []
        for league in leagues:
            rows = self.compute_standings(league.to_scope(), as_of)
            saved_rows = self.persist_snapshot(league.slug, as_of, rows)
            summary = SnapshotSummary(
                scope_key=league.slug,
                snapshot_date=as_of,
                ranked_rows=len(rows),
                saved_rows=saved_rows,
            )
            summaries.append(summary)
            if echo is not None:
                echo(
                    f"league={summary.scope_key} "
                    f"snapshot_date={summary.snapshot_date.isoformat()} "
                    f"ranked_rows={summary.ranked_rows} "
                    f"saved_rows={summary.saved_rows}"
                )
        return summaries

    def biggest_gainers(self, scope_key: str, *, limit: int = 10) -> list[RankGain]:
        """Largest climbers between the two most recent snapshots of a scope."""
        snapshot_dates = sorted(self.snapshot_store.fetch_snapshot_dates(scope_key, limit=2))
        if len(snapshot_dates) < 2:
            return []
        prior_date, latest_date = snapshot_dates[-2], snapshot_dates[-1]
        return biggest_gainers(
            self.snapshot_store.fetch_snapshot(scope_key, latest_date),
            self.snapshot_store.fetch_snapshot(scope_key, prior_date),
            limit=limit,
        )


__all__ = ["LeaderboardService", "SnapshotSummary"]
