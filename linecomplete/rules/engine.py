"""Rule interpreter for completeness checks.

Rules come in two shapes:

- ``FixedRule``: always counted. Contributes one check to the denominator and
  one to the numerator when it passes.
- ``ConditionalRule``: a guard rule that is always counted, plus sub-rules that
  only exist when the guard passed *and* the answer it guarded unlocks them
  (e.g. "lighting required = yes" unlocks "light model selected").

Applying a rule yields ``RuleOutcome`` values; a ``Tally`` is folded from those
outcomes without shared counters, so a denominator only grows when a sub-rule
was actually instantiated.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from typing import Literal, Union

from linecomplete.errors import ScoringInvariantViolation
from linecomplete.models import LineGap


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    passed: bool
    gaps: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FixedRule:
    """A single check. ``gaps`` are reported only when it fails."""

    passed: bool
    gaps: tuple[str, ...]
    kind: Literal["fixed"] = "fixed"

    @classmethod
    def check(cls, passed: bool, gap: str) -> FixedRule:
        return cls(passed=passed, gaps=(gap,))


@dataclass(frozen=True, slots=True)
class ConditionalRule:
    """A guard check whose sub-rules are instantiated only when unlocked."""

    guard: FixedRule
    unlock: bool
    sub_rules: tuple[Rule, ...] = ()
    kind: Literal["conditional"] = "conditional"


Rule = Union[FixedRule, ConditionalRule]


@dataclass(frozen=True, slots=True)
class RuleGroup:
    """Rules whose failures are reported under one gap category."""

    category: str
    rules: tuple[Rule, ...]


def apply_rule(rule: Rule) -> list[RuleOutcome]:
    """Interpret one rule into the outcomes of every check it instantiates."""
    if isinstance(rule, FixedRule):
        return [RuleOutcome(passed=rule.passed, gaps=() if rule.passed else rule.gaps)]

    if isinstance(rule, ConditionalRule):
        outcomes = apply_rule(rule.guard)
        if rule.guard.passed and rule.unlock:
            for sub_rule in rule.sub_rules:
                outcomes.extend(apply_rule(sub_rule))
        return outcomes

    raise TypeError(f"Unsupported rule type: {type(rule).__name__}")


@dataclass(frozen=True, slots=True)
class Tally:
    """Immutable pass/total counts."""

    total: int = 0
    passed: int = 0

    def __post_init__(self) -> None:
        if self.total < 0 or self.passed < 0 or self.passed > self.total:
            raise ScoringInvariantViolation(
                f"Invalid tally: passed={self.passed}, total={self.total}"
            )

    def record(self, outcome: RuleOutcome) -> Tally:
        return Tally(
            total=self.total + 1,
            passed=self.passed + (1 if outcome.passed else 0),
        )

    def __add__(self, other: Tally) -> Tally:
        return Tally(total=self.total + other.total, passed=self.passed + other.passed)

    @property
    def percentage(self) -> int:
        """Score rounded half-up to an integer; 0 when nothing was checked."""
        if self.total == 0:
            return 0
        # floor(passed / total * 100 + 0.5) in exact integer arithmetic
        return (self.passed * 200 + self.total) // (self.total * 2)

    @property
    def is_complete(self) -> bool:
        return self.percentage == 100

    @classmethod
    def fold(cls, outcomes: Iterable[RuleOutcome]) -> Tally:
        return reduce(cls.record, outcomes, cls())


def evaluate_groups(groups: Sequence[RuleGroup]) -> tuple[Tally, list[LineGap]]:
    """Apply every group's rules, returning the combined tally and gap report.

    Categories with no failures are left out of the report.
    """
    tally = Tally()
    gaps: list[LineGap] = []

    for group in groups:
        outcomes = [outcome for rule in group.rules for outcome in apply_rule(rule)]
        tally = tally + Tally.fold(outcomes)

        items = [gap for outcome in outcomes if not outcome.passed for gap in outcome.gaps]
        if items:
            gaps.append(LineGap(category=group.category, items=items))

    return tally, gaps
