#!/usr/bin/env python3
"""Show computed standings or recent climbers for one configured league."""

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
from domain.common import ScoringMethod
from domain.leaderboard.config import DEFAULT_LEAGUE_CONFIG_DIR, find_league, load_league_configs
from domain.leaderboard.ranking import select_rows
from domain.pipeline import LeaderboardService
from repositories import SqlFactStore, SqlSnapshotStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query standings for a configured league.",
)


def _build_service(db_url: str | None) -> LeaderboardService:
    session_factory = create_session_factory(create_db_engine(resolve_db_url(db_url)))
    return LeaderboardService(SqlFactStore(session_factory), SqlSnapshotStore(session_factory))


def _parse_date(value: str | None, option: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{option} must be YYYY-MM-DD", param_hint=option) from exc


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def standings(
    slug: Annotated[str, typer.Argument(help="League slug from the config directory.")],
    date_from: Annotated[
        str | None,
        typer.Option("--from", help="Override season start (YYYY-MM-DD)."),
    ] = None,
    date_to: Annotated[
        str | None,
        typer.Option("--to", help="Override season end (YYYY-MM-DD)."),
    ] = None,
    method: Annotated[
        ScoringMethod | None,
        typer.Option("--method", help="Preview another scoring method (ALL, BEST_X)."),
    ] = None,
    cap: Annotated[
        int | None,
        typer.Option("--cap", help="Preview another BEST_X cap."),
    ] = None,
    as_of: Annotated[
        str | None,
        typer.Option("--as-of", help="Compare movement against snapshots before this date."),
    ] = None,
    with_movement: Annotated[
        bool,
        typer.Option("--with-movement", help="Annotate rows with movement since the last snapshot."),
    ] = False,
    search: Annotated[
        str | None,
        typer.Option("--search", help="Case-insensitive name filter."),
    ] = None,
    limit: Annotated[int, typer.Option("--limit", help="Number of rows to print.")] = 100,
    offset: Annotated[int, typer.Option("--offset", help="Rows to skip.")] = 0,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of league TOML files."),
    ] = DEFAULT_LEAGUE_CONFIG_DIR,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", envvar=DB_URL_ENV_VAR, help="Database URL."),
    ] = None,
) -> None:
    """Print the ranked standings of one league."""
    if limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")
    if offset < 0:
        raise typer.BadParameter("--offset must be >= 0")

    try:
        league = find_league(load_league_configs(config_dir), slug)
    except KeyError as exc:
        raise typer.BadParameter(str(exc), param_hint="slug") from exc

    scope = league.to_scope(
        date_from=_parse_date(date_from, "--from"),
        date_to=_parse_date(date_to, "--to"),
        method=method,
        cap=cap,
    )
    reference_date = _parse_date(as_of, "--as-of") or datetime.now().date()

    service = _build_service(db_url)
    rows = service.compute_standings(scope, reference_date, with_movement=with_movement)
    page = select_rows(rows, search=search, limit=limit, offset=offset)

    typer.echo(
        f"league={league.slug} label={league.label} "
        f"from={scope.date_from} to={scope.date_to} "
        f"method={scope.scoring_method.value} cap={scope.cap} "
        f"ranked_rows={len(rows)}"
    )
    for row in page:
        line = (
            f"{row.position:>4}  {row.name:<28} {row.display_points:>10.2f}  "
            f"results={row.results_display:<9} avg={row.average_display:<16} "
            f"low={row.lowest_counted_points:.2f} wins={row.wins} ft={row.final_tables}"
        )
        if with_movement:
            line += f" move={row.movement:+d}"
        typer.echo(line)


@app.command()
def gainers(
    slug: Annotated[str, typer.Argument(help="League slug (snapshot scope key).")],
    limit: Annotated[int, typer.Option("--limit", help="Number of players to return.")] = 10,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", envvar=DB_URL_ENV_VAR, help="Database URL."),
    ] = None,
) -> None:
    """Print the biggest climbers between the two most recent snapshots."""
    if limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")

    results = _build_service(db_url).biggest_gainers(slug, limit=limit)
    if not results:
        typer.echo("not enough snapshots to compare")
        return

    for gain in results:
        typer.echo(
            f"player_id={gain.player_id} from={gain.from_position} "
            f"to={gain.to_position} delta=+{gain.delta}"
        )


if __name__ == "__main__":
    app()
