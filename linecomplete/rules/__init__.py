"""Completeness rules and their interpreter."""

from linecomplete.rules.engine import (
    ConditionalRule,
    FixedRule,
    Rule,
    RuleGroup,
    RuleOutcome,
    Tally,
    apply_rule,
    evaluate_groups,
)

__all__ = [
    "ConditionalRule",
    "FixedRule",
    "Rule",
    "RuleGroup",
    "RuleOutcome",
    "Tally",
    "apply_rule",
    "evaluate_groups",
]
