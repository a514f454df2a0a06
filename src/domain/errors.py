"""Exceptions raised by the leaderboard engine and its adapters."""

from __future__ import annotations


class LeaderboardError(Exception):
    """Base class for leaderboard failures."""


class InvalidScope(LeaderboardError, ValueError):
    """A scope descriptor cannot be computed (missing or inverted dates, bad options)."""


class AdapterFailure(LeaderboardError):
    """A fact or snapshot store was unreachable or returned malformed data."""


__all__ = ["AdapterFailure", "InvalidScope", "LeaderboardError"]
