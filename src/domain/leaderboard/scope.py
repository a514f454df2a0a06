"""Scope validation and the pure result-fact filter."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from domain.common import HighRollerFilter, ResultFact, ScopeDescriptor, ScoringMethod
from domain.errors import InvalidScope


def validate_scope(scope: ScopeDescriptor) -> None:
    """Reject descriptors that cannot describe a slice of results.

    A non-positive cap is not an error: BEST_X scoring treats it as uncapped.
    """
    if not isinstance(scope.date_from, date) or not isinstance(scope.date_to, date):
        raise InvalidScope(
            f"scope requires date_from and date_to, got {scope.date_from!r}..{scope.date_to!r}"
        )
    if scope.date_from > scope.date_to:
        raise InvalidScope(
            f"date_from={scope.date_from.isoformat()} is after date_to={scope.date_to.isoformat()}"
        )
    if not isinstance(scope.scoring_method, ScoringMethod):
        raise InvalidScope(f"Unsupported scoring method: {scope.scoring_method!r}")
    if not isinstance(scope.high_roller_filter, HighRollerFilter):
        raise InvalidScope(f"Unsupported high-roller filter: {scope.high_roller_filter!r}")
    if isinstance(scope.cap, bool) or not isinstance(scope.cap, int):
        raise InvalidScope(f"cap must be an integer, got {scope.cap!r}")
    if scope.max_buy_in is not None and scope.max_buy_in < 0:
        raise InvalidScope(f"max_buy_in must be >= 0, got {scope.max_buy_in!r}")


def fact_in_scope(fact: ResultFact, scope: ScopeDescriptor) -> bool:
    """Return True when one fact passes every active filter of the scope."""
    if fact.event_date is None:
        return False
    if scope.date_from is not None and fact.event_date < scope.date_from:
        return False
    if scope.date_to is not None and fact.event_date > scope.date_to:
        return False

    if scope.high_roller_filter is HighRollerFilter.TRUE_ONLY and fact.is_high_roller is not True:
        return False

    # Unknown buy-ins are admitted; only a known buy-in at or above the cap is excluded.
    if scope.max_buy_in is not None and fact.buy_in is not None and fact.buy_in >= scope.max_buy_in:
        return False

    if scope.series_or_festival_ids is not None:
        if fact.series_id not in scope.series_or_festival_ids and (
            fact.festival_id not in scope.series_or_festival_ids
        ):
            return False

    return True


def filter_facts(facts: Iterable[ResultFact], scope: ScopeDescriptor) -> list[ResultFact]:
    """Select the facts that qualify for a scope, preserving input order."""
    return [fact for fact in facts if fact_in_scope(fact, scope)]


__all__ = ["fact_in_scope", "filter_facts", "validate_scope"]
