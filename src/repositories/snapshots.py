"""Persistence for dated leaderboard snapshots."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy import delete, func, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from domain.common import SnapshotEntry
from domain.errors import AdapterFailure
from models import Base, LeaderboardPosition


def ensure_snapshot_schema(engine: Engine) -> None:
    """Create the leaderboard_positions table and its indexes if they do not exist."""
    Base.metadata.create_all(bind=engine, tables=[LeaderboardPosition.__table__])


def _to_entry(row: LeaderboardPosition) -> SnapshotEntry:
    return SnapshotEntry(
        snapshot_date=row.snapshot_date,
        scope_key=row.league,
        player_id=row.player_id,
        position=row.position,
        points=row.points,
    )


def fetch_snapshot(session: Session, scope_key: str, snapshot_date: date) -> list[SnapshotEntry]:
    statement = (
        select(LeaderboardPosition)
        .where(
            LeaderboardPosition.league == scope_key,
            LeaderboardPosition.snapshot_date == snapshot_date,
        )
        .order_by(LeaderboardPosition.position, LeaderboardPosition.player_id)
    )
    return [_to_entry(row) for row in session.execute(statement).scalars()]


def fetch_latest_snapshot_date(session: Session, scope_key: str, before_date: date) -> date | None:
    """Most recent snapshot date for the scope strictly before ``before_date``."""
    return session.scalar(
        select(func.max(LeaderboardPosition.snapshot_date)).where(
            LeaderboardPosition.league == scope_key,
            LeaderboardPosition.snapshot_date < before_date,
        )
    )


def fetch_snapshot_dates(session: Session, scope_key: str, limit: int) -> list[date]:
    statement = (
        select(LeaderboardPosition.snapshot_date)
        .where(LeaderboardPosition.league == scope_key)
        .group_by(LeaderboardPosition.snapshot_date)
        .order_by(LeaderboardPosition.snapshot_date.desc())
        .limit(limit)
    )
    return list(session.execute(statement).scalars())


def replace_snapshot(
    session: Session,
    scope_key: str,
    snapshot_date: date,
    entries: Sequence[SnapshotEntry],
) -> None:
    """Delete then insert one dated snapshot; the caller owns the transaction."""
    session.execute(
        delete(LeaderboardPosition).where(
            LeaderboardPosition.league == scope_key,
            LeaderboardPosition.snapshot_date == snapshot_date,
        )
    )
    payload = [
        {
            "league": scope_key,
            "snapshot_date": snapshot_date,
            "player_id": entry.player_id,
            "position": entry.position,
            "points": entry.points,
        }
        for entry in entries
    ]
    if payload:
        session.execute(insert(LeaderboardPosition), payload)


class SqlSnapshotStore:
    """SnapshotStore adapter backed by the leaderboard_positions table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def fetch_latest_snapshot(self, scope_key: str, before_date: date) -> list[SnapshotEntry]:
        try:
            with self.session_factory() as session:
                latest_date = fetch_latest_snapshot_date(session, scope_key, before_date)
                if latest_date is None:
                    return []
                return fetch_snapshot(session, scope_key, latest_date)
        except SQLAlchemyError as exc:
            raise AdapterFailure(f"Fetching latest snapshot for {scope_key} failed: {exc}") from exc

    def fetch_snapshot(self, scope_key: str, snapshot_date: date) -> list[SnapshotEntry]:
        try:
            with self.session_factory() as session:
                return fetch_snapshot(session, scope_key, snapshot_date)
        except SQLAlchemyError as exc:
            raise AdapterFailure(f"Fetching snapshot for {scope_key} failed: {exc}") from exc

    def fetch_snapshot_dates(self, scope_key: str, limit: int = 2) -> list[date]:
        if limit <= 0:
            raise ValueError("limit must be greater than 0")
        try:
            with self.session_factory() as session:
                return fetch_snapshot_dates(session, scope_key, limit)
        except SQLAlchemyError as exc:
            raise AdapterFailure(f"Fetching snapshot dates for {scope_key} failed: {exc}") from exc

    def upsert_snapshot(
        self,
        scope_key: str,
        snapshot_date: date,
        entries: Sequence[SnapshotEntry],
    ) -> None:
        try:
            with self.session_factory() as session:
                try:
                    replace_snapshot(session, scope_key, snapshot_date, entries)
                    session.commit()
                except Exception:
                    session.rollback()
                    raise
        except SQLAlchemyError as exc:
            raise AdapterFailure(f"Writing snapshot for {scope_key} failed: {exc}") from exc


__all__ = [
    "SqlSnapshotStore",
    "ensure_snapshot_schema",
    "fetch_latest_snapshot_date",
    "fetch_snapshot",
    "fetch_snapshot_dates",
    "replace_snapshot",
]
