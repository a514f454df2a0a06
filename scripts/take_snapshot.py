#!/usr/bin/env python3
"""Snapshot the standings of every configured league for one date."""

from __future__ import annotations

import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DB_URL_ENV_VAR, create_db_engine, create_session_factory, resolve_db_url
from domain.leaderboard.config import DEFAULT_LEAGUE_CONFIG_DIR, load_league_configs
from domain.pipeline import LeaderboardService
from repositories import SqlFactStore, SqlSnapshotStore, ensure_snapshot_schema


def take_snapshot(
    snapshot_date: Annotated[
        str | None,
        typer.Option("--date", help="Snapshot date override (YYYY-MM-DD). Defaults to today."),
    ] = None,
    leagues: Annotated[
        list[str] | None,
        typer.Option("--league", help="Only snapshot these league slugs (repeatable)."),
    ] = None,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of league TOML files."),
    ] = DEFAULT_LEAGUE_CONFIG_DIR,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", envvar=DB_URL_ENV_VAR, help="Database URL."),
    ] = None,
    ensure_schema: Annotated[
        bool,
        typer.Option("--ensure-schema", help="Create the leaderboard_positions table if missing."),
    ] = False,
) -> None:
    """Compute and persist one dated snapshot per league."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if snapshot_date is None:
        as_of = datetime.now().date()
    else:
        try:
            as_of = date.fromisoformat(snapshot_date)
        except ValueError as exc:
            raise typer.BadParameter("--date must be YYYY-MM-DD", param_hint="--date") from exc

    configs = load_league_configs(config_dir)
    if leagues:
        wanted = {slug.lower() for slug in leagues}
        configs = [config for config in configs if config.slug in wanted]
        if not configs:
            raise typer.BadParameter(
                f"No leagues matching {sorted(wanted)} found in {config_dir}",
                param_hint="--league",
            )

    engine = create_db_engine(resolve_db_url(db_url))
    if ensure_schema:
        ensure_snapshot_schema(engine)
    session_factory = create_session_factory(engine)
    service = LeaderboardService(SqlFactStore(session_factory), SqlSnapshotStore(session_factory))

    typer.echo(f"loaded_leagues={len(configs)} config_dir={config_dir} snapshot_date={as_of}")
    summaries = service.snapshot_leagues(configs, as_of, echo=typer.echo)
    total_saved = sum(summary.saved_rows for summary in summaries)
    typer.echo(f"completed snapshot_date={as_of} saved_rows={total_saved}")


if __name__ == "__main__":
    typer.run(take_snapshot)
