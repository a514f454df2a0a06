"""Leaderboard computation: scope filter, aggregation, scoring, ranking, movement."""

from domain.leaderboard.aggregator import aggregate_facts
from domain.leaderboard.bonuses import BonusRule, parse_bonus_rule
from domain.leaderboard.config import LeagueConfig, find_league, load_league_configs
from domain.leaderboard.consent import display_name
from domain.leaderboard.movement import RankGain, apply_movement, biggest_gainers
from domain.leaderboard.ranking import rank_players, select_rows
from domain.leaderboard.scope import filter_facts, validate_scope
from domain.leaderboard.scoring import score_player, score_players

__all__ = [
    "BonusRule",
    "LeagueConfig",
    "RankGain",
    "aggregate_facts",
    "apply_movement",
    "biggest_gainers",
    "display_name",
    "filter_facts",
    "find_league",
    "load_league_configs",
    "parse_bonus_rule",
    "rank_players",
    "score_player",
    "score_players",
    "select_rows",
    "validate_scope",
]
