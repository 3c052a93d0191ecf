"""Tests for the motivation engine: signals, weights, aggregator, trend, change detector."""

import pytest
from datetime import datetime, timedelta, timezone

from teampulse.engine import signals
from teampulse.engine.aggregator import aggregate, round_half_up
from teampulse.engine.change_detector import detect_change
from teampulse.engine.recommendation import (
    DECLINE_ACTIONS,
    DECLINE_CAUSES,
    IMPROVEMENT_ACTIONS,
    IMPROVEMENT_CAUSES,
    URGENT_ACTION,
)
from teampulse.engine.trend import linear_trend
from teampulse.engine.weights import (
    ACTIVITY,
    SELF_REPORTED,
    check_in_confidence,
    overall_confidence,
    weight_vector,
)
from teampulse.models.records import ActivityData, TaskStatus, TeamCompatibility
from teampulse.models.results import ChangeKind


# ═══════════════════════════════════════════════════════════════════════════
# Sub-score calculators (pure functions)
# ═══════════════════════════════════════════════════════════════════════════


class TestSelfReported:
    def test_recency_weights_newest_heaviest(self):
        assert signals.recency_weights(3) == pytest.approx([0.8, 0.9, 1.0])

    def test_recency_weights_floor(self):
        weights = signals.recency_weights(12)
        assert weights[0] == 0.5
        assert min(weights) == 0.5
        assert weights[-1] == 1.0

    def test_weighted_mean(self, make_check_ins):
        score = signals.self_reported_score(make_check_ins([3, 4, 5]))
        assert score == pytest.approx((3 * 0.8 + 4 * 0.9 + 5 * 1.0) / 2.7)

    def test_no_check_ins_is_neutral(self):
        assert signals.self_reported_score([]) == 3.0


class TestTaskCompletion:
    def test_half_completed(self, make_task):
        tasks = [make_task(status=TaskStatus.COMPLETED), make_task()]
        assert signals.task_completion_score(tasks) == 2.5

    def test_all_completed(self, make_task):
        tasks = [make_task(status=TaskStatus.COMPLETED) for _ in range(3)]
        assert signals.task_completion_score(tasks) == 5.0

    def test_no_tasks_defaults_to_half_rate(self):
        assert signals.task_completion_score([]) == 2.5


class TestSkillFit:
    def test_threshold_is_inclusive(self, make_profile, make_task):
        profile = make_profile(skills={"development": 3.5})
        tasks = [make_task(category="development", difficulty=5)]
        assert signals.skill_fit_score(profile, tasks) == pytest.approx(3.5)

    def test_just_below_threshold_is_no_match(self, make_profile, make_task):
        profile = make_profile(skills={"development": 3.4999})
        tasks = [make_task(category="development", difficulty=5)]
        assert signals.skill_fit_score(profile, tasks) == 0.0

    def test_legacy_strength_counts_as_four(self, make_profile, make_task):
        profile = make_profile(strengths=("design",))
        tasks = [make_task(category="design", difficulty=5)]
        assert signals.skill_fit_score(profile, tasks) == pytest.approx(4.0)

    def test_structured_rating_wins_over_strength_tag(self, make_profile, make_task):
        profile = make_profile(skills={"design": 2.0}, strengths=("design",))
        assert signals.skill_rating_for(profile, "design") == 2.0
        assert signals.skill_fit_score(profile, [make_task(category="design")]) == 0.0

    def test_unknown_category_is_neutral_and_unmatched(self, make_profile, make_task):
        profile = make_profile()
        assert signals.skill_rating_for(profile, "astrology") == 3.0
        assert signals.skill_fit_score(profile, [make_task(category="astrology")]) == 0.0

    def test_completed_tasks_dilute_average(self, make_profile, make_task):
        profile = make_profile(skills={"development": 5})
        tasks = [
            make_task(category="development", difficulty=5, status=TaskStatus.COMPLETED),
            make_task(category="development", difficulty=5),
        ]
        assert signals.skill_fit_score(profile, tasks) == pytest.approx(2.5)

    def test_no_tasks(self, make_profile):
        assert signals.skill_fit_score(make_profile(), []) == 0.0


class TestTeamCompatibility:
    def test_neutral_without_overlap(self, no_partners):
        assert signals.team_compatibility_score(no_partners) == 3.0

    def test_preferred_partners_raise(self):
        compat = TeamCompatibility(
            partner_ids=("A", "B", "C"), preferred_partners=("A", "B"),
        )
        assert signals.team_compatibility_score(compat) == 4.0

    def test_avoided_partners_lower_and_clamp_at_zero(self):
        compat = TeamCompatibility(
            partner_ids=("A", "B", "C", "D"), avoided_partners=("A", "B", "C", "D"),
        )
        assert compat.avoided_count == 4
        assert signals.team_compatibility_score(compat) == 0.0

    def test_clamps_at_five(self):
        ids = tuple(f"P{i}" for i in range(6))
        compat = TeamCompatibility(partner_ids=ids, preferred_partners=ids)
        assert signals.team_compatibility_score(compat) == 5.0


class TestTraitPrior:
    @pytest.mark.parametrize("code,expected", [
        ("ENTP", 4.0),
        ("ENFJ", 4.0),
        ("ESTJ", 3.5),
        ("INTJ", 3.0),
        ("ISFP", 2.5),
        ("UNKNOWN", 3.0),
        ("", 3.0),
    ])
    def test_prefix_lookup(self, code, expected):
        assert signals.trait_prior_score(code) == expected


class TestActivity:
    def test_no_activity_is_neutral(self):
        assert signals.activity_score(ActivityData()) == 3.0

    def test_task_updates_only(self):
        assert signals.activity_score(ActivityData(task_updates=5)) == pytest.approx(4.2)

    def test_full_cascade(self):
        activity = ActivityData(task_updates=5, commits=10, messages=20, meeting_attendance=1.0)
        # 4.2 -> 4.6 -> 4.76 -> 4.832
        assert signals.activity_score(activity) == pytest.approx(4.832)

    def test_order_dependent_blend(self):
        activity = ActivityData(task_updates=5, meeting_attendance=0.2)
        assert signals.activity_score(activity) == pytest.approx(4.2 * 0.7 + 1.0 * 0.3)

    def test_message_score_saturates(self):
        many = signals.activity_score(ActivityData(messages=200))
        enough = signals.activity_score(ActivityData(messages=20))
        assert many == enough == pytest.approx(3.0 * 0.6 + 5.0 * 0.4)


# ═══════════════════════════════════════════════════════════════════════════
# Weights & confidence
# ═══════════════════════════════════════════════════════════════════════════


class TestWeights:
    def test_full_vector_sums_to_one(self):
        assert sum(weight_vector(True, True).values()) == pytest.approx(1.0)

    def test_redistribution_without_check_ins(self):
        weights = weight_vector(False, False)
        assert ACTIVITY not in weights
        non_self = {k: v for k, v in weights.items() if k != SELF_REPORTED}
        assert sum(non_self.values()) == pytest.approx(0.95)

    def test_weight_vector_returns_fresh_dict(self):
        weight_vector(True, True)[SELF_REPORTED] = 0.0
        assert weight_vector(True, True)[SELF_REPORTED] == 0.35

    def test_check_in_confidence_saturates(self):
        assert check_in_confidence(7, 0) == 1.0
        assert check_in_confidence(14, 0) == 1.0

    def test_check_in_confidence_decays_with_age(self):
        assert check_in_confidence(7, 7) == pytest.approx(0.5)
        assert check_in_confidence(7, 30) == pytest.approx(0.3)

    def test_check_in_confidence_zero_without_data(self):
        assert check_in_confidence(0, 0) == 0.0

    def test_overall_confidence_bounds(self):
        assert overall_confidence(0.0, False) == 0.5
        assert overall_confidence(1.0, True) == 1.0
        assert overall_confidence(3 / 7, True) == pytest.approx(3 / 7 * 0.6 + 0.4)


# ═══════════════════════════════════════════════════════════════════════════
# Score Aggregator
# ═══════════════════════════════════════════════════════════════════════════


class TestAggregator:
    def test_cold_start_entp(self, make_profile, no_partners):
        """No tasks, no check-ins: (2.5*.40 + 0*.25 + 3*.15 + 4*.15) / .95 = 2.16."""
        result = aggregate(make_profile(trait_code="ENTP"), [], no_partners, [])
        assert result.score == 2.2
        assert result.confidence == 0.5
        assert result.breakdown == {
            "self_reported": 3.0,
            "task_completion": 2.5,
            "skill_fit": 0.0,
            "team_compatibility": 3.0,
            "trait_prior": 4.0,
        }

    def test_full_week_of_check_ins(self, make_profile, no_partners, make_check_ins, today):
        check_ins = make_check_ins([4.0] * 7)
        result = aggregate(make_profile(trait_code="ENTP"), [], no_partners, check_ins, as_of=today)
        # 4*.35 + 2.5*.25 + 0*.20 + 3*.15 + 4*.05 = 2.675
        assert result.score == 2.7
        assert result.confidence == 1.0

    def test_stale_check_ins_lower_confidence(self, make_profile, no_partners, make_check_ins, today):
        check_ins = make_check_ins([4, 4, 4], end=today - timedelta(days=14))
        fresh = aggregate(make_profile(), [], no_partners, check_ins, as_of=today - timedelta(days=14))
        stale = aggregate(make_profile(), [], no_partners, check_ins, as_of=today)
        assert fresh.confidence == pytest.approx(3 / 7 * 0.6 + 0.4)
        assert stale.confidence == 0.5

    def test_as_of_defaults_to_latest_check_in(self, make_profile, no_partners, make_check_ins, today):
        check_ins = make_check_ins([3, 4, 5])
        assert aggregate(make_profile(), [], no_partners, check_ins) == \
            aggregate(make_profile(), [], no_partners, check_ins, as_of=today)

    def test_as_of_accepts_datetime(self, make_profile, no_partners, make_check_ins, today):
        check_ins = make_check_ins([3, 4, 5])
        noon = datetime(today.year, today.month, today.day, 12, tzinfo=timezone.utc)
        assert aggregate(make_profile(), [], no_partners, check_ins, as_of=noon) == \
            aggregate(make_profile(), [], no_partners, check_ins, as_of=today)

    def test_activity_adds_breakdown_entry(self, make_profile, no_partners):
        result = aggregate(make_profile(), [], no_partners, [], ActivityData(task_updates=5))
        assert result.breakdown[ACTIVITY] == pytest.approx(4.2)

    def test_self_reported_has_no_weight_without_check_ins(self, make_profile, make_task, no_partners):
        profile = make_profile(trait_code="ISFJ", skills={"development": 4})
        tasks = [make_task(difficulty=4), make_task(status=TaskStatus.COMPLETED)]
        result = aggregate(profile, tasks, no_partners, [])
        b = result.breakdown
        expected = (
            b["task_completion"] * 0.40 + b["skill_fit"] * 0.25
            + b["team_compatibility"] * 0.15 + b["trait_prior"] * 0.15
        ) / 0.95
        assert result.score == round_half_up(expected)

    def test_half_rounds_up(self, make_profile, make_task, no_partners, make_check_ins, today):
        """1*.35 + 5*.25 + 0*.20 + 3*.15 + 4*.05 = 2.25, reported as 2.3."""
        tasks = [make_task(status=TaskStatus.COMPLETED) for _ in range(4)]
        check_ins = make_check_ins([1.0] * 7)
        result = aggregate(make_profile(trait_code="ENTP"), tasks, no_partners, check_ins, as_of=today)
        assert result.score == 2.3

    @pytest.mark.parametrize("raw,expected", [
        (2.25, 2.3),
        (1.95, 2.0),
        (2.24, 2.2),
        (3.0, 3.0),
    ])
    def test_round_half_up(self, raw, expected):
        assert round_half_up(raw) == expected

    def test_idempotent(self, make_profile, make_task, no_partners, make_check_ins, today):
        args = (make_profile(), [make_task()], no_partners, make_check_ins([2, 3, 4]))
        assert aggregate(*args, as_of=today) == aggregate(*args, as_of=today)

    @pytest.mark.parametrize("delta", [0.1, 0.5, 1.0])
    def test_monotonic_in_check_in_scores(self, make_profile, make_task, no_partners, make_check_ins, today, delta):
        base = [1.5, 2.0, 2.5, 3.0]
        low = aggregate(make_profile(), [make_task()], no_partners, make_check_ins(base), as_of=today)
        high = aggregate(
            make_profile(), [make_task()], no_partners,
            make_check_ins([s + delta for s in base]), as_of=today,
        )
        assert high.score >= low.score

    @pytest.mark.parametrize("scores,trait,status", [
        ([], "ISFP", TaskStatus.PENDING),
        ([1.0] * 10, "ISFP", TaskStatus.PENDING),
        ([5.0] * 10, "ENTP", TaskStatus.COMPLETED),
        ([1.0, 5.0, 1.0], "XXXX", TaskStatus.IN_PROGRESS),
    ])
    def test_score_and_confidence_bounds(self, make_profile, make_task, make_check_ins, today, scores, trait, status):
        compat = TeamCompatibility(partner_ids=("A", "B"), avoided_partners=("A", "B"))
        check_ins = make_check_ins(scores) if scores else []
        result = aggregate(
            make_profile(trait_code=trait, skills={"development": 5}),
            [make_task(status=status, difficulty=5)],
            compat,
            check_ins,
            ActivityData(meeting_attendance=0.1),
            as_of=today,
        )
        assert 1.0 <= result.score <= 5.0
        assert 0.5 <= result.confidence <= 1.0


# ═══════════════════════════════════════════════════════════════════════════
# Trend estimator
# ═══════════════════════════════════════════════════════════════════════════


class TestLinearTrend:
    def test_unit_slope(self):
        assert linear_trend([1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_flat(self):
        assert linear_trend([2.0, 2.0, 2.0, 2.0]) == pytest.approx(0.0)

    def test_too_short(self):
        assert linear_trend([]) == 0.0
        assert linear_trend([4.2]) == 0.0

    def test_only_trailing_window_is_fitted(self):
        assert linear_trend([1.0, 2.0, 3.0] + [3.0] * 7) == pytest.approx(0.0)


# ═══════════════════════════════════════════════════════════════════════════
# Change Detector
# ═══════════════════════════════════════════════════════════════════════════


class TestChangeDetector:
    @pytest.mark.parametrize("scores", [[], [5.0], [1.0, 5.0], [5.0, 1.0]])
    def test_insufficient_data_is_low_confidence_stable(self, scores):
        change = detect_change(scores, 3.0)
        assert change.change_type == ChangeKind.STABLE
        assert change.magnitude == 0
        assert change.confidence == 0.3
        assert change.potential_causes == ()
        assert change.recommended_actions == ()

    def test_sudden_drop(self):
        change = detect_change([3.0, 3.1, 3.0, 2.9, 1.5], 3.0)
        assert change.change_type == ChangeKind.SUDDEN_DROP
        assert change.magnitude == pytest.approx(1.4)
        assert change.duration == 1
        assert change.confidence == 0.9
        assert change.potential_causes == DECLINE_CAUSES
        assert change.recommended_actions == DECLINE_ACTIONS

    def test_sudden_drop_threshold_inclusive(self):
        assert detect_change([3.0, 3.0, 2.0], 3.0).change_type == ChangeKind.SUDDEN_DROP

    def test_large_drop_prepends_urgent_action(self):
        change = detect_change([4.0, 4.0, 2.0], 3.0)
        assert change.magnitude == pytest.approx(2.0)
        assert change.recommended_actions[0] == URGENT_ACTION
        assert len(change.recommended_actions) == 6

    def test_sudden_rise(self):
        change = detect_change([2.0, 2.0, 3.5], 3.0)
        assert change.change_type == ChangeKind.SUDDEN_RISE
        assert change.magnitude == pytest.approx(1.5)
        assert change.potential_causes == IMPROVEMENT_CAUSES
        assert change.recommended_actions == IMPROVEMENT_ACTIONS

    def test_gradual_decline(self):
        change = detect_change([4.0, 3.8, 3.6, 3.4, 3.2, 3.0, 2.8], 3.5)
        assert change.change_type == ChangeKind.GRADUAL_DECLINE
        assert change.magnitude == pytest.approx(1.4)
        assert change.duration == 7
        assert change.confidence == 0.7
        assert len(change.potential_causes) == 6
        assert change.recommended_actions == DECLINE_ACTIONS

    def test_gradual_improvement(self):
        change = detect_change([2.0, 2.3, 2.6, 2.9, 3.2], 3.0)
        assert change.change_type == ChangeKind.GRADUAL_IMPROVEMENT
        assert change.magnitude == pytest.approx(1.5)
        assert change.duration == 5
        assert len(change.recommended_actions) == 4

    def test_stable(self):
        change = detect_change([3.0, 3.05, 3.0, 3.05, 3.0], 3.0)
        assert change.change_type == ChangeKind.STABLE
        assert change.magnitude == 0
        assert change.confidence == 0.8

    def test_old_rise_outside_window_is_stable(self):
        change = detect_change([1.0, 2.0, 3.0] + [3.0] * 7, 3.0)
        assert change.change_type == ChangeKind.STABLE

    def test_historical_average_does_not_change_classification(self):
        scores = [4.0, 3.8, 3.6, 3.4, 3.2]
        assert detect_change(scores, 1.0) == detect_change(scores, 5.0)
