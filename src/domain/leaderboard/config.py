"""Load league definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from domain.common import HighRollerFilter, ScopeDescriptor, ScoringMethod
from domain.config_base import BaseConfig, load_toml_configs
from domain.leaderboard.bonuses import BonusRule, UnsupportedBonus, parse_bonus_rule

ROOT_DIR = Path(__file__).resolve().parents[3]
DEFAULT_LEAGUE_CONFIG_DIR = ROOT_DIR / "configs" / "leagues"


@dataclass(frozen=True)
class LeagueConfig(BaseConfig):
    """One league: a season window, scoring method, filters and bonuses."""

    label: str
    season_start: date
    season_end: date
    scoring_method: ScoringMethod
    cap: int
    high_roller_filter: HighRollerFilter
    max_buy_in: float | None
    series_or_festival_ids: frozenset[str] | None
    bonus_rules: tuple[BonusRule, ...]

    @property
    def slug(self) -> str:
        return self.name

    def to_scope(
        self,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
        method: ScoringMethod | None = None,
        cap: int | None = None,
    ) -> ScopeDescriptor:
        """Build the scope for this league, optionally previewing another range or method."""
        return ScopeDescriptor(
            date_from=date_from or self.season_start,
            date_to=date_to or self.season_end,
            high_roller_filter=self.high_roller_filter,
            max_buy_in=self.max_buy_in,
            series_or_festival_ids=self.series_or_festival_ids,
            scoring_method=method or self.scoring_method,
            cap=self.cap if cap is None else cap,
            bonus_rules=self.bonus_rules,
            scope_key=self.slug,
        )

    def as_config_json(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "label": self.label,
            "season_start": self.season_start.isoformat(),
            "season_end": self.season_end.isoformat(),
            "scoring_method": self.scoring_method.value,
            "cap": self.cap,
            "high_roller_filter": self.high_roller_filter.value,
            "max_buy_in": self.max_buy_in,
            "series_or_festival_ids": (
                None
                if self.series_or_festival_ids is None
                else sorted(self.series_or_festival_ids)
            ),
            "bonuses": [{"kind": _bonus_kind(rule), "points": rule.points} for rule in self.bonus_rules],
        }


def load_league_configs(config_dir: Path = DEFAULT_LEAGUE_CONFIG_DIR) -> list[LeagueConfig]:
    """Load and validate all league TOML config files in a directory."""
    return load_toml_configs(
        config_dir,
        _parse_league_config,
        duplicate_name_label="league slug",
    )


def find_league(configs: list[LeagueConfig], slug: str) -> LeagueConfig:
    for config in configs:
        if config.slug == slug:
            return config
    available = ", ".join(config.slug for config in configs)
    raise KeyError(f"No league configured with slug={slug!r}. Available: {available}")


def _bonus_kind(rule: BonusRule) -> str:
    if isinstance(rule, UnsupportedBonus):
        return rule.unsupported_kind
    return rule.kind


def _parse_date(value: Any, *, file_path: Path, key: str) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"{file_path}: {key} must be an ISO date, got {value!r}") from exc
    raise ValueError(f"{file_path}: {key} is required")


def _parse_league_config(raw: dict[str, Any], file_path: Path) -> LeagueConfig:
    league_raw = raw.get("league", {})
    season_raw = raw.get("season", {})
    scoring_raw = raw.get("scoring", {})
    filters_raw = raw.get("filters", {})
    bonuses_raw = raw.get("bonuses", [])

    slug = str(league_raw.get("slug", "")).strip().lower()
    if not slug:
        raise ValueError(f"{file_path}: [league].slug is required")

    label = str(league_raw.get("label", slug)).strip() or slug
    description_value = league_raw.get("description")
    description = None if description_value is None else str(description_value)

    season_start = _parse_date(
        season_raw.get("start_date"), file_path=file_path, key="[season].start_date"
    )
    season_end = _parse_date(season_raw.get("end_date"), file_path=file_path, key="[season].end_date")
    if season_start > season_end:
        raise ValueError(f"{file_path}: [season].start_date must not be after end_date")

    method_value = str(scoring_raw.get("method", ScoringMethod.CUMULATIVE.value)).strip().upper()
    try:
        scoring_method = ScoringMethod(method_value)
    except ValueError as exc:
        raise ValueError(f"{file_path}: [scoring].method must be ALL or BEST_X") from exc

    cap = int(scoring_raw.get("cap", 0))

    high_roller_value = str(filters_raw.get("high_roller", HighRollerFilter.ANY.value)).strip().lower()
    try:
        high_roller_filter = HighRollerFilter(high_roller_value)
    except ValueError as exc:
        raise ValueError(f"{file_path}: [filters].high_roller must be any or true_only") from exc

    max_buy_in_value = filters_raw.get("max_buy_in")
    max_buy_in = None if max_buy_in_value is None else float(max_buy_in_value)
    if max_buy_in is not None and max_buy_in < 0.0:
        raise ValueError(f"{file_path}: [filters].max_buy_in must be >= 0")

    ids_value = filters_raw.get("series_or_festival_ids")
    series_or_festival_ids = (
        None if ids_value is None else frozenset(str(item) for item in ids_value)
    )

    if not isinstance(bonuses_raw, list):
        raise ValueError(f"{file_path}: [[bonuses]] must be an array of tables")
    bonus_rules: list[BonusRule] = []
    for index, bonus_raw in enumerate(bonuses_raw):
        kind = str(bonus_raw.get("kind", "")).strip()
        if not kind:
            raise ValueError(f"{file_path}: bonuses[{index}].kind is required")
        bonus_rules.append(parse_bonus_rule(kind, float(bonus_raw.get("points", 0.0))))

    return LeagueConfig(
        name=slug,
        description=description,
        file_path=file_path,
        label=label,
        season_start=season_start,
        season_end=season_end,
        scoring_method=scoring_method,
        cap=cap,
        high_roller_filter=high_roller_filter,
        max_buy_in=max_buy_in,
        series_or_festival_ids=series_or_festival_ids,
        bonus_rules=tuple(bonus_rules),
    )


__all__ = [
    "DEFAULT_LEAGUE_CONFIG_DIR",
    "LeagueConfig",
    "find_league",
    "load_league_configs",
]
