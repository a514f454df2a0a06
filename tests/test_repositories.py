"""SQLite-backed tests for the fact and snapshot adapters."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import insert
from sqlalchemy.engine import Engine

from db import create_db_engine, create_session_factory
from domain.common import HighRollerFilter, ScopeDescriptor, SnapshotEntry
from domain.errors import AdapterFailure
from domain.pipeline import LeaderboardService
from repositories.facts import SqlFactStore, _events, _metadata, _players, _results
from repositories.snapshots import SqlSnapshotStore, ensure_snapshot_schema


@pytest.fixture()
def engine(tmp_path: Path) -> Engine:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'leaderboards.db'}")
    _metadata.create_all(engine)
    ensure_snapshot_schema(engine)
    with engine.begin() as connection:
        connection.execute(
            insert(_players),
            [
                {"id": "p1", "forename": "Ann", "surname": "Lee", "display_name": None},
                {"id": "p2", "forename": "Bob", "surname": "Ray", "display_name": "Bobby R"},
                {"id": "p3", "forename": "Cat", "surname": "Moe", "display_name": None},
            ],
        )
        connection.execute(
            insert(_events),
            [
                {
                    "id": "e1",
                    "name": "Main Event",
                    "start_date": date(2025, 1, 5),
                    "is_high_roller": False,
                    "buy_in": 200.0,
                    "series_id": "s1",
                    "festival_id": None,
                    "is_deleted": False,
                },
                {
                    "id": "e2",
                    "name": "High Roller",
                    "start_date": date(2025, 1, 6),
                    "is_high_roller": True,
                    "buy_in": 2000.0,
                    "series_id": "s1",
                    "festival_id": "f1",
                    "is_deleted": None,
                },
                {
                    "id": "e3",
                    "name": "Deleted Event",
                    "start_date": date(2025, 1, 7),
                    "is_high_roller": False,
                    "buy_in": 100.0,
                    "series_id": None,
                    "festival_id": None,
                    "is_deleted": True,
                },
                {
                    "id": "e4",
                    "name": "Last Year",
                    "start_date": date(2024, 12, 30),
                    "is_high_roller": False,
                    "buy_in": 100.0,
                    "series_id": None,
                    "festival_id": None,
                    "is_deleted": False,
                },
            ],
        )
        connection.execute(
            insert(_results),
            [
                _result(1, "p1", "e1", 50.0, 1, 1000.0, False),
                _result(2, "p2", "e1", 30.0, 2, 500.0, False),
                _result(3, "p1", "e2", 70.0, 1, 8000.0, False),
                _result(4, "p3", "e2", None, 12, None, False),
                _result(5, "p2", "e3", 99.0, 1, None, True),
                _result(6, "p3", "e4", 10.0, 5, None, True),
                {**_result(7, "p2", "e2", 40.0, 3, None, False), "is_deleted": True},
            ],
        )
    return engine


def _result(
    result_id: int,
    player_id: str,
    event_id: str,
    points: float | None,
    position: int | None,
    prize: float | None,
    consent: bool,
) -> dict[str, object]:
    return {
        "id": result_id,
        "player_id": player_id,
        "event_id": event_id,
        "points": points,
        "position_of_prize": position,
        "prize_amount": prize,
        "gdpr_flag": consent,
        "is_deleted": False,
    }


def test_fetch_result_facts_skips_deleted_and_out_of_range_rows(engine: Engine) -> None:
    store = SqlFactStore(create_session_factory(engine))
    facts = store.fetch_result_facts(date(2025, 1, 1), date(2025, 1, 31))

    assert [(fact.player_id, fact.event_id) for fact in facts] == [
        ("p1", "e1"),
        ("p2", "e1"),
        ("p1", "e2"),
        ("p3", "e2"),
    ]
    high_roller = facts[2]
    assert high_roller.event_date == date(2025, 1, 6)
    assert high_roller.is_high_roller is True
    assert high_roller.buy_in == pytest.approx(2000.0)
    assert high_roller.festival_id == "f1"
    assert high_roller.prize_amount == pytest.approx(8000.0)
    assert facts[3].points is None
    assert facts[3].position_of_prize == 12


def test_fetch_result_facts_high_roller_only(engine: Engine) -> None:
    store = SqlFactStore(create_session_factory(engine))
    facts = store.fetch_result_facts(date(2025, 1, 1), date(2025, 1, 31), high_roller_only=True)
    assert {fact.event_id for fact in facts} == {"e2"}


def test_fetch_player_identity_reports_consent_across_all_results(engine: Engine) -> None:
    store = SqlFactStore(create_session_factory(engine))
    identities = store.fetch_player_identity(["p1", "p2", "p3", "missing"])

    assert set(identities) == {"p1", "p2", "p3"}
    assert identities["p2"].display_name == "Bobby R"
    assert identities["p1"].has_consented is False
    # Consent comes from any live result row, even one outside every scope.
    assert identities["p2"].has_consented is True
    assert identities["p3"].has_consented is True


def test_fact_store_wraps_database_errors(tmp_path: Path) -> None:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    store = SqlFactStore(create_session_factory(engine))
    with pytest.raises(AdapterFailure):
        store.fetch_result_facts(date(2025, 1, 1), date(2025, 1, 31))


def _entries(snapshot_date: date, positions: dict[str, int]) -> list[SnapshotEntry]:
    return [
        SnapshotEntry(
            snapshot_date=snapshot_date,
            scope_key="npl",
            player_id=player_id,
            position=position,
            points=float(100 - position),
        )
        for player_id, position in positions.items()
    ]


def test_upsert_snapshot_is_idempotent(engine: Engine) -> None:
    store = SqlSnapshotStore(create_session_factory(engine))
    entries = _entries(date(2025, 1, 8), {"p1": 1, "p2": 2})

    store.upsert_snapshot("npl", date(2025, 1, 8), entries)
    store.upsert_snapshot("npl", date(2025, 1, 8), entries)

    stored = store.fetch_snapshot("npl", date(2025, 1, 8))
    assert [(entry.player_id, entry.position) for entry in stored] == [("p1", 1), ("p2", 2)]


def test_upsert_snapshot_replaces_rows_for_the_same_date_only(engine: Engine) -> None:
    store = SqlSnapshotStore(create_session_factory(engine))
    store.upsert_snapshot("npl", date(2025, 1, 1), _entries(date(2025, 1, 1), {"p1": 2, "p3": 1}))
    store.upsert_snapshot("npl", date(2025, 1, 8), _entries(date(2025, 1, 8), {"p1": 1}))
    store.upsert_snapshot("npl", date(2025, 1, 8), _entries(date(2025, 1, 8), {"p2": 1}))

    assert [entry.player_id for entry in store.fetch_snapshot("npl", date(2025, 1, 8))] == ["p2"]
    assert len(store.fetch_snapshot("npl", date(2025, 1, 1))) == 2


def test_fetch_latest_snapshot_is_strictly_before_date(engine: Engine) -> None:
    store = SqlSnapshotStore(create_session_factory(engine))
    store.upsert_snapshot("npl", date(2025, 1, 1), _entries(date(2025, 1, 1), {"p1": 7}))
    store.upsert_snapshot("npl", date(2025, 1, 8), _entries(date(2025, 1, 8), {"p1": 3}))
    store.upsert_snapshot("hrl", date(2025, 1, 5), _entries(date(2025, 1, 5), {"p1": 1}))

    latest = store.fetch_latest_snapshot("npl", date(2025, 1, 8))
    assert [(entry.snapshot_date, entry.position) for entry in latest] == [(date(2025, 1, 1), 7)]
    assert store.fetch_latest_snapshot("npl", date(2025, 1, 1)) == []
    assert store.fetch_snapshot_dates("npl") == [date(2025, 1, 8), date(2025, 1, 1)]


def test_service_end_to_end_against_sqlite(engine: Engine) -> None:
    session_factory = create_session_factory(engine)
    service = LeaderboardService(SqlFactStore(session_factory), SqlSnapshotStore(session_factory))
    scope = ScopeDescriptor(
        date_from=date(2025, 1, 1),
        date_to=date(2025, 1, 31),
        high_roller_filter=HighRollerFilter.ANY,
        scope_key="npl",
    )

    rows = service.compute_standings(scope, date(2025, 2, 1))
    assert [(row.position, row.player_id, row.name) for row in rows] == [
        (1, "p1", "A. L."),
        (2, "p2", "Bobby R"),
        (3, "p3", "Cat Moe"),
    ]
    assert rows[0].final_points == pytest.approx(120.0)
    assert rows[0].prize_total == pytest.approx(9000.0)

    assert service.persist_snapshot("npl", date(2025, 2, 1), rows) == 3
    assert service.persist_snapshot("npl", date(2025, 2, 1), rows) == 3
    stored = SqlSnapshotStore(session_factory).fetch_snapshot("npl", date(2025, 2, 1))
    assert len(stored) == 3
