"""Read-only fact store over the results/events/players tables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    false,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from domain.common import PlayerIdentity, ResultFact
from domain.errors import AdapterFailure

IDENTITY_BATCH_SIZE = 1000

_metadata = MetaData()

_players = Table(
    "players",
    _metadata,
    Column("id", String(64), primary_key=True),
    Column("forename", String),
    Column("surname", String),
    Column("display_name", String),
)

_events = Table(
    "events",
    _metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String),
    Column("start_date", Date),
    Column("is_high_roller", Boolean),
    Column("buy_in", Float),
    Column("series_id", String(64)),
    Column("festival_id", String(64)),
    Column("is_deleted", Boolean),
)

_results = Table(
    "results",
    _metadata,
    Column("id", Integer, primary_key=True),
    Column("player_id", String(64)),
    Column("event_id", String(64)),
    Column("points", Float),
    Column("position_of_prize", Integer),
    Column("prize_amount", Float),
    Column("gdpr_flag", Boolean),
    Column("is_deleted", Boolean),
)


def _not_deleted(column: Any) -> Any:
    return func.coalesce(column, false()) == false()


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)  # type: ignore[call-overload]


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)  # type: ignore[arg-type]


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _event_date(row: Any) -> date:
    value = row["event_date"]
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise AdapterFailure(
        f"result_id={row['result_id']} event_id={row['event_id']} has invalid event date={value!r}"
    )


def fetch_result_facts(
    session: Session,
    date_from: date,
    date_to: date,
    *,
    high_roller_only: bool = False,
) -> list[ResultFact]:
    """Fetch non-deleted results whose event falls in [date_from, date_to], oldest first."""
    statement = (
        select(
            _results.c.id.label("result_id"),
            _results.c.player_id,
            _results.c.event_id,
            _results.c.points,
            _results.c.position_of_prize,
            _results.c.prize_amount,
            func.coalesce(_results.c.gdpr_flag, false()).label("consent_flag"),
            _events.c.start_date.label("event_date"),
            _events.c.is_high_roller,
            _events.c.buy_in,
            _events.c.series_id,
            _events.c.festival_id,
        )
        .select_from(_results.join(_events, _results.c.event_id == _events.c.id))
        .where(
            _not_deleted(_results.c.is_deleted),
            _not_deleted(_events.c.is_deleted),
            _results.c.player_id.is_not(None),
            _events.c.start_date >= date_from,
            _events.c.start_date <= date_to,
        )
        .order_by(_events.c.start_date, _events.c.id, _results.c.id)
    )
    if high_roller_only:
        statement = statement.where(_events.c.is_high_roller.is_(True))

    rows = session.execute(statement).mappings().all()

    return [
        ResultFact(
            player_id=str(row["player_id"]),
            event_id=str(row["event_id"]),
            event_date=_event_date(row),
            points=_optional_float(row["points"]),
            position_of_prize=_optional_int(row["position_of_prize"]),
            prize_amount=_optional_float(row["prize_amount"]),
            consent_flag=bool(row["consent_flag"]),
            is_high_roller=None if row["is_high_roller"] is None else bool(row["is_high_roller"]),
            buy_in=_optional_float(row["buy_in"]),
            series_id=_optional_str(row["series_id"]),
            festival_id=_optional_str(row["festival_id"]),
        )
        for row in rows
    ]


def _batched(values: list[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


def fetch_player_identity(session: Session, player_ids: Iterable[str]) -> dict[str, PlayerIdentity]:
    """Fetch names plus whether the player consented on any non-deleted result."""
    requested = sorted({str(player_id) for player_id in player_ids if player_id})
    identities: dict[str, PlayerIdentity] = {}

    for batch in _batched(requested, IDENTITY_BATCH_SIZE):
        consenting = set(
            session.execute(
                select(_results.c.player_id)
                .where(
                    _results.c.player_id.in_(batch),
                    _results.c.gdpr_flag.is_(True),
                    _not_deleted(_results.c.is_deleted),
                )
                .group_by(_results.c.player_id)
            ).scalars()
        )

        rows = session.execute(
            select(
                _players.c.id,
                _players.c.forename,
                _players.c.surname,
                _players.c.display_name,
            ).where(_players.c.id.in_(batch))
        ).mappings()

        for row in rows:
            player_id = str(row["id"])
            identities[player_id] = PlayerIdentity(
                player_id=player_id,
                forename=row["forename"],
                surname=row["surname"],
                display_name=row["display_name"],
                has_consented=player_id in consenting,
            )

    return identities


class SqlFactStore:
    """FactStore adapter that opens one short-lived session per call."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def fetch_result_facts(
        self,
        date_from: date,
        date_to: date,
        *,
        high_roller_only: bool = False,
    ) -> list[ResultFact]:
        try:
            with self.session_factory() as session:
                return fetch_result_facts(
                    session,
                    date_from,
                    date_to,
                    high_roller_only=high_roller_only,
                )
        except SQLAlchemyError as exc:
            raise AdapterFailure(f"Fetching result facts failed: {exc}") from exc

    def fetch_player_identity(self, player_ids: Iterable[str]) -> dict[str, PlayerIdentity]:
        try:
            with self.session_factory() as session:
                return fetch_player_identity(session, player_ids)
        except SQLAlchemyError as exc:
            raise AdapterFailure(f"Fetching player identities failed: {exc}") from exc


__all__ = [
    "IDENTITY_BATCH_SIZE",
    "SqlFactStore",
    "fetch_player_identity",
    "fetch_result_facts",
]
