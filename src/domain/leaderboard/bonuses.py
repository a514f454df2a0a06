"""Bonus-point rules and their registry.

Each rule kind is a small class with its own ``evaluate``; the scorer only sums
whatever the configured rules return. New kinds are added by registering a
class, and kinds this engine does not know evaluate to zero so older engines
keep working against newer league configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from domain.common import PlayerAggregate, ScoringMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BonusContext:
    """Scoring facts a bonus rule may depend on."""

    method: ScoringMethod
    used_count: int
    total_count: int


@dataclass(frozen=True)
class BonusRule:
    """One configured bonus: a kind tag and a point value."""

    kind: ClassVar[str] = ""

    points: float

    def evaluate(self, aggregate: PlayerAggregate, context: BonusContext) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class BackToBackWinsBonus(BonusRule):
    """Award ``points`` for every pair of adjacent wins in the player's own event timeline."""

    kind: ClassVar[str] = "back_to_back_wins"

    def evaluate(self, aggregate: PlayerAggregate, context: BonusContext) -> float:
        outcomes = aggregate.chronological_outcomes
        pairs = sum(
            1 for previous, current in zip(outcomes, outcomes[1:]) if previous and current
        )
        return pairs * self.points


@dataclass(frozen=True)
class ParticipationAfterCapBonus(BonusRule):
    """Award ``points`` for each result played beyond the counted ones under BEST_X."""

    kind: ClassVar[str] = "participation_after_cap"

    def evaluate(self, aggregate: PlayerAggregate, context: BonusContext) -> float:
        if context.method is not ScoringMethod.BEST_X:
            return 0.0
        return max(context.total_count - context.used_count, 0) * self.points


@dataclass(frozen=True)
class UnsupportedBonus(BonusRule):
    """Placeholder for a bonus kind this engine does not implement."""

    unsupported_kind: str = ""

    def evaluate(self, aggregate: PlayerAggregate, context: BonusContext) -> float:
        return 0.0


_REGISTRY: dict[str, type[BonusRule]] = {}


def register(rule_class: type[BonusRule]) -> None:
    """Register one bonus rule class under its kind tag."""
    key = rule_class.kind.lower()
    if not key:
        raise ValueError(f"{rule_class.__name__} does not declare a bonus kind")
    if key in _REGISTRY:
        raise ValueError(f"Duplicate bonus rule registration for kind={key}")
    _REGISTRY[key] = rule_class


def registered_kinds() -> list[str]:
    return sorted(_REGISTRY)


def parse_bonus_rule(kind: str, points: float) -> BonusRule:
    """Build a rule from its kind tag; unknown kinds become a zero-valued placeholder."""
    key = str(kind).strip().lower()
    rule_class = _REGISTRY.get(key)
    if rule_class is None:
        logger.debug("Ignoring unsupported bonus kind=%s", kind)
        return UnsupportedBonus(points=float(points), unsupported_kind=key)
    return rule_class(points=float(points))


def evaluate_bonuses(
    rules: tuple[BonusRule, ...],
    aggregate: PlayerAggregate,
    context: BonusContext,
) -> float:
    return sum((rule.evaluate(aggregate, context) for rule in rules), 0.0)


for _rule_class in (BackToBackWinsBonus, ParticipationAfterCapBonus):
    register(_rule_class)


__all__ = [
    "BackToBackWinsBonus",
    "BonusContext",
    "BonusRule",
    "ParticipationAfterCapBonus",
    "UnsupportedBonus",
    "evaluate_bonuses",
    "parse_bonus_rule",
    "register",
    "registered_kinds",
]
