"""Unit tests for the rule interpreter and tally fold."""

from __future__ import annotations

import pytest

from linecomplete.errors import ScoringInvariantViolation
from linecomplete.rules.engine import (
    ConditionalRule,
    FixedRule,
    RuleGroup,
    RuleOutcome,
    Tally,
    apply_rule,
    evaluate_groups,
)


class TestApplyRule:
    def test_fixed_rule_pass_has_no_gaps(self):
        outcomes = apply_rule(FixedRule.check(True, "Camera Name"))
        assert outcomes == [RuleOutcome(passed=True)]

    def test_fixed_rule_failure_reports_gap(self):
        outcomes = apply_rule(FixedRule.check(False, "Camera Name"))
        assert outcomes == [RuleOutcome(passed=False, gaps=("Camera Name",))]

    def test_fixed_rule_with_several_gaps_is_one_check(self):
        rule = FixedRule(passed=False, gaps=("Camera Name", "Camera Model"))
        outcomes = apply_rule(rule)
        assert len(outcomes) == 1
        assert outcomes[0].gaps == ("Camera Name", "Camera Model")

    def test_unanswered_guard_skips_sub_rules(self):
        rule = ConditionalRule(
            guard=FixedRule.check(False, "Confirm whether lighting is required"),
            unlock=True,
            sub_rules=(FixedRule.check(False, "Light Model"),),
        )
        outcomes = apply_rule(rule)
        assert len(outcomes) == 1
        assert outcomes[0].gaps == ("Confirm whether lighting is required",)

    def test_answered_but_locked_guard_skips_sub_rules(self):
        rule = ConditionalRule(
            guard=FixedRule.check(True, "Confirm whether lighting is required"),
            unlock=False,
            sub_rules=(FixedRule.check(False, "Light Model"),),
        )
        assert apply_rule(rule) == [RuleOutcome(passed=True)]

    def test_unlocked_guard_instantiates_sub_rules(self):
        rule = ConditionalRule(
            guard=FixedRule.check(True, "Confirm whether PLC is required"),
            unlock=True,
            sub_rules=(
                FixedRule.check(False, "PLC Model"),
                FixedRule.check(True, "At least 1 Relay Output"),
            ),
        )
        outcomes = apply_rule(rule)
        assert [o.passed for o in outcomes] == [True, False, True]

    def test_nested_cascades(self):
        inner = ConditionalRule(
            guard=FixedRule.check(True, "inner guard"),
            unlock=True,
            sub_rules=(FixedRule.check(False, "deepest"),),
        )
        outer = ConditionalRule(
            guard=FixedRule.check(True, "outer guard"), unlock=True, sub_rules=(inner,)
        )
        outcomes = apply_rule(outer)
        assert len(outcomes) == 3
        assert outcomes[-1].gaps == ("deepest",)

    def test_unknown_rule_type_raises(self):
        with pytest.raises(TypeError):
            apply_rule("not a rule")  # type: ignore[arg-type]


class TestTally:
    def test_empty_tally_is_zero_percent(self):
        assert Tally().percentage == 0
        assert Tally().is_complete is False

    def test_fold_counts_every_outcome(self):
        tally = Tally.fold(
            [RuleOutcome(True), RuleOutcome(False, ("x",)), RuleOutcome(True)]
        )
        assert tally == Tally(total=3, passed=2)

    def test_percentage_rounds(self):
        assert Tally(total=3, passed=2).percentage == 67
        assert Tally(total=3, passed=1).percentage == 33

    def test_percentage_rounds_half_up(self):
        assert Tally(total=8, passed=1).percentage == 13  # 12.5
        assert Tally(total=200, passed=1).percentage == 1  # 0.5

    def test_ninety_nine_is_not_complete(self):
        tally = Tally(total=100, passed=99)
        assert tally.percentage == 99
        assert tally.is_complete is False

    def test_all_passed_is_complete(self):
        tally = Tally(total=28, passed=28)
        assert tally.percentage == 100
        assert tally.is_complete is True

    def test_addition(self):
        assert Tally(2, 1) + Tally(3, 3) == Tally(5, 4)

    @pytest.mark.parametrize("total,passed", [(1, 2), (-1, 0), (0, -1)])
    def test_impossible_counts_raise(self, total, passed):
        with pytest.raises(ScoringInvariantViolation):
            Tally(total=total, passed=passed)


class TestEvaluateGroups:
    def test_groups_without_failures_are_omitted(self):
        groups = [
            RuleGroup("Line Information", (FixedRule.check(True, "Line Name"),)),
            RuleGroup(
                "Process Flow",
                (FixedRule.check(False, "At least 1 position required"),),
            ),
        ]
        tally, gaps = evaluate_groups(groups)

        assert tally == Tally(total=2, passed=1)
        assert len(gaps) == 1
        assert gaps[0].category == "Process Flow"
        assert gaps[0].items == ["At least 1 position required"]

    def test_gap_order_follows_rule_order(self):
        group = RuleGroup(
            "Camera",
            (
                FixedRule.check(False, "first"),
                FixedRule.check(True, "skipped"),
                FixedRule(passed=False, gaps=("second", "third")),
            ),
        )
        _, gaps = evaluate_groups([group])
        assert gaps[0].items == ["first", "second", "third"]

    def test_no_groups(self):
        tally, gaps = evaluate_groups([])
        assert tally.total == 0
        assert gaps == []
