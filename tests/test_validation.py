"""
Tests for the Validation Engine.

These tests verify that:
1. verify() is sound: every Verified value satisfies its predicate
2. Exactly one outcome is produced for every value
3. Dependent chains run left to right and stop at the first failure
4. Staged construction only accepts a field with its validated prefix
"""

import logging

import pytest

from subtyped import (
    Domain,
    Predicate,
    PredicateRegistry,
    Stage,
    StagedComposite,
    UnknownPredicateError,
    Unverified,
    Verified,
    begin,
    check,
    default_registry,
    evaluate,
    evaluate_composite,
    unwrap,
    verify,
    verify_all,
)


class RecordingStage:
    """A stage check that records every call."""

    def __init__(self, result=True):
        self.result = result
        self.calls = []

    def __call__(self, context, value):
        self.calls.append((context, value))
        return self.result


def make_chain(first_result, second_result):
    first = RecordingStage(first_result)
    second = RecordingStage(second_result)
    registry = PredicateRegistry()
    predicate = registry.dependent(
        "chain",
        [Stage("first", 0, first), Stage("second", 1, second)],
    )
    return registry, predicate, first, second


# =============================================================================
# SOUNDNESS AND COMPLETENESS
# =============================================================================

class TestSoundness:
    """Every Verified value satisfies its predicate."""

    SAMPLES = {
        "non_negative_integer": [3, 3.1, -3, -3.1, 0, "3", True],
        "prime": [2, 13, 14, 1, 0, -7, 97],
        "non_empty": [[1, 2, 3], [], "a", ""],
        "month_day": [("April", 31), ("April", 30), ("February", 29), ("Smarch", 1)],
        "divisible": [(6, 2), (7, 2), (6, 0)],
    }

    @pytest.mark.parametrize("name", sorted(SAMPLES))
    def test_verified_implies_evaluate(self, name):
        predicate = default_registry.get(name)
        for value in self.SAMPLES[name]:
            outcome = verify(name, value)
            if isinstance(outcome, Verified):
                assert evaluate(predicate, unwrap(outcome)) is True

    @pytest.mark.parametrize("name", sorted(SAMPLES))
    def test_exactly_one_outcome(self, name):
        predicate = default_registry.get(name)
        for value in self.SAMPLES[name]:
            outcome = verify(name, value)
            assert isinstance(outcome, (Verified, Unverified))
            assert bool(outcome) == evaluate(predicate, value)

    def test_verify_accepts_predicate_object(self):
        positive = Predicate(name="gt_zero", check=lambda x: x > 0)
        assert verify(positive, 1)
        assert not verify(positive, 0)

    def test_unknown_predicate_raises(self):
        with pytest.raises(UnknownPredicateError):
            verify("not_a_predicate", 1)

    def test_predicate_errors_propagate(self):
        broken = Predicate(name="broken", check=lambda x: 1 / 0)
        with pytest.raises(ZeroDivisionError):
            verify(broken, 1)

    def test_verify_all_preserves_order(self):
        outcomes = verify_all("prime", [2, 4, 5])
        assert [bool(o) for o in outcomes] == [True, False, True]
        assert [o.value for o in outcomes] == [2, 4, 5]

    def test_outcomes_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="subtyped.validation"):
            verify("prime", 13)
            verify("prime", 14)
        assert "Verified 13 under 'prime'" in caplog.text
        assert "Rejected 14 under 'prime'" in caplog.text


# =============================================================================
# CHECK DIAGNOSTICS
# =============================================================================

class TestCheck:
    """check() reports why a predicate did not hold."""

    def test_simple_failure_reason(self):
        result = check(default_registry.get("prime"), 14)
        assert result.held is False
        assert "14" in result.reason
        assert result.stage is None

    def test_dependent_failure_names_stage(self):
        result = check(default_registry.get("month_day"), ("April", 31))
        assert result.held is False
        assert result.stage == "day_in_month"

    def test_unverified_carries_stage(self):
        outcome = verify("month_day", ("Smarch", 1))
        assert outcome.stage == "month"


# =============================================================================
# DEPENDENT EVALUATION
# =============================================================================

class TestDependentEvaluation:
    """Dependent chains evaluate left to right with short-circuit."""

    def test_later_stage_skipped_after_failure(self):
        _, predicate, first, second = make_chain(False, True)
        assert evaluate_composite(predicate, ("a", "b")) is False
        assert len(first.calls) == 1
        assert second.calls == []

    def test_later_stage_sees_prefix(self):
        _, predicate, first, second = make_chain(True, True)
        assert evaluate_composite(predicate, ("a", "b")) is True
        assert first.calls == [((), "a")]
        assert second.calls == [(("a",), "b")]

    def test_wrong_arity_is_negative_outcome(self):
        _, predicate, first, second = make_chain(True, True)
        assert evaluate_composite(predicate, ("a",)) is False
        assert evaluate_composite(predicate, ("a", "b", "c")) is False
        assert first.calls == []

    def test_string_is_not_a_tuple(self):
        _, predicate, first, _ = make_chain(True, True)
        assert evaluate_composite(predicate, "ab") is False
        assert first.calls == []

    def test_list_accepted_as_tuple(self):
        _, predicate, _, _ = make_chain(True, True)
        assert evaluate_composite(predicate, ["a", "b"]) is True

    def test_record_stages_see_earlier_keys(self):
        registry = PredicateRegistry()
        end = RecordingStage(True)
        predicate = registry.dependent(
            "span",
            [Stage("start", "start", lambda ctx, x: x >= 0), Stage("end", "end", end)],
            domain=Domain.RECORD,
        )
        assert evaluate_composite(predicate, {"start": 1, "end": 5, "extra": None})
        assert end.calls == [({"start": 1}, 5)]

    def test_record_missing_key_is_negative_outcome(self):
        registry = PredicateRegistry()
        predicate = registry.dependent(
            "span",
            [Stage("start", "start", lambda ctx, x: True), Stage("end", "end", lambda ctx, y: True)],
            domain=Domain.RECORD,
        )
        assert evaluate_composite(predicate, {"start": 1}) is False
        assert evaluate_composite(predicate, [1, 2]) is False

    def test_evaluate_composite_requires_dependent(self):
        with pytest.raises(TypeError):
            evaluate_composite(default_registry.get("prime"), (1, 2))


# =============================================================================
# STAGED CONSTRUCTION
# =============================================================================

class TestStagedComposite:
    """Fields are only accepted together with their validated prefix."""

    def test_full_construction(self):
        builder = begin("month_day")
        assert builder.next_field == 0
        builder = builder.feed("April")
        assert isinstance(builder, StagedComposite)
        assert builder.next_field == 1
        builder = builder.feed(30)
        assert builder.complete

        outcome = builder.finish()
        assert isinstance(outcome, Verified)
        assert unwrap(outcome) == ("April", 30)

    def test_invalid_second_field_stops_construction(self):
        outcome = begin("month_day").feed("April").feed(31)
        assert isinstance(outcome, Unverified)
        assert outcome.stage == "day_in_month"
        assert outcome.value == ("April", 31)

    def test_invalid_first_field_stops_construction(self):
        outcome = begin("month_day").feed("Smarch")
        assert isinstance(outcome, Unverified)
        assert outcome.stage == "month"

    def test_incomplete_finish_is_unverified(self):
        outcome = begin("month_day").feed("April").finish()
        assert isinstance(outcome, Unverified)
        assert "1 of 2" in outcome.reason

    def test_directly_built_invalid_prefix_is_rejected_at_finish(self):
        """A builder constructed with a prefix that never went through feed()."""
        builder = StagedComposite(default_registry.get("month_day"), ("April", 31))
        assert builder.complete
        outcome = builder.finish()
        assert isinstance(outcome, Unverified)
        assert outcome.stage == "day_in_month"
        assert outcome.value == ("April", 31)

    def test_directly_built_invalid_first_field_is_rejected_at_finish(self):
        builder = StagedComposite(default_registry.get("divisible"), ("ten", 5))
        outcome = builder.finish()
        assert isinstance(outcome, Unverified)
        assert outcome.stage == "dividend"

    def test_directly_built_valid_prefix_verifies(self):
        outcome = StagedComposite(default_registry.get("month_day"), ("April", 30)).finish()
        assert isinstance(outcome, Verified)
        assert unwrap(outcome) == ("April", 30)

    def test_finish_rechecks_record_builder(self):
        registry = PredicateRegistry()
        span = registry.dependent(
            "span",
            [Stage("start", "start", lambda ctx, x: True), Stage("end", "end", lambda ctx, y: y >= ctx["start"])],
            domain=Domain.RECORD,
        )
        outcome = StagedComposite(span, (5, 1)).finish()
        assert isinstance(outcome, Unverified)
        assert outcome.stage == "end"
        assert outcome.value == {"start": 5, "end": 1}

    def test_builders_are_immutable(self):
        start = begin("month_day")
        start.feed("April")
        assert start.prefix == ()

    def test_overfeeding_raises(self):
        builder = begin("month_day").feed("April").feed(30)
        with pytest.raises(ValueError, match="already has all"):
            builder.feed(1)

    def test_staged_agrees_with_whole_evaluation(self):
        predicate = default_registry.get("month_day")
        for month, day in [("January", 31), ("June", 31), ("February", 28), ("February", 29)]:
            staged = begin(predicate).feed(month)
            if isinstance(staged, StagedComposite):
                staged = staged.feed(day)
            if isinstance(staged, StagedComposite):
                staged = staged.finish()
            assert bool(staged) == evaluate(predicate, (month, day))

    def test_record_builder_assembles_dict(self):
        registry = PredicateRegistry()
        registry.dependent(
            "span",
            [Stage("start", "start", lambda ctx, x: True), Stage("end", "end", lambda ctx, y: y >= ctx["start"])],
            domain=Domain.RECORD,
        )
        outcome = begin("span", registry).feed(1).feed(3).finish()
        assert unwrap(outcome) == {"start": 1, "end": 3}

    def test_begin_rejects_simple_predicate(self):
        with pytest.raises(TypeError, match="not a dependent predicate"):
            begin("prime")
