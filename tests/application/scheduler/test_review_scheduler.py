from datetime import datetime, timedelta, timezone
from itertools import product

import pytest

from kairos.application.scheduler.review_scheduler import (
    ASSESSMENTS,
    LAPSE_INSIGHTS,
    LONG_TERM_INSIGHTS,
    OFF_PEAK_TIMING_HINT,
    PEAK_INSIGHT,
    PEAK_TIMING_HINT,
    PRE_SLEEP_INSIGHT,
    STRENGTHENING_INSIGHT,
    ReviewScheduler,
    compute_next_review,
    easiness_delta,
    is_peak_hour,
    is_pre_sleep_hour,
)
from kairos.domain.scheduling.errors import InvalidQuality
from kairos.domain.scheduling.models import CardSchedulingState, ReviewQuality


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, 17, hour, minute)


@pytest.fixture
def scheduler():
    return ReviewScheduler()


# --- Easiness delta and time windows ---


@pytest.mark.parametrize(
    "quality,expected",
    [(0, -0.8), (1, -0.54), (2, -0.32), (3, -0.14), (4, 0.0), (5, 0.1)],
)
def test_easiness_delta_curve(quality, expected):
    assert easiness_delta(quality) == pytest.approx(expected)


def test_peak_and_pre_sleep_windows_are_inclusive():
    assert [h for h in range(24) if is_peak_hour(h)] == [9, 10, 11, 15, 16, 17]
    assert [h for h in range(24) if is_pre_sleep_hour(h)] == [21, 22, 23]


# --- Concrete scenarios ---


def test_fresh_card_good_review_in_peak_window(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5, interval_days=0, repetitions=0)

    result = scheduler.compute_next_review(4, prior, at(10, 30))

    assert result.state.repetitions == 1
    assert result.state.interval_days == 1
    assert result.state.easiness_factor == pytest.approx(2.6)
    assert result.bonus == pytest.approx(0.1)
    assert result.assessment == ASSESSMENTS[4]
    assert PEAK_INSIGHT in result.insights
    assert STRENGTHENING_INSIGHT in result.insights
    assert result.timing_hint == PEAK_TIMING_HINT


def test_third_success_grows_interval_from_new_easiness(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5, interval_days=6, repetitions=2)

    result = scheduler.compute_next_review(5, prior, at(14))

    assert result.state.repetitions == 3
    assert result.state.easiness_factor == pytest.approx(2.6)
    assert result.state.interval_days == round(6 * 2.6)  # 16
    assert result.bonus == 0
    assert PEAK_INSIGHT not in result.insights
    assert result.timing_hint == OFF_PEAK_TIMING_HINT
    assert result.state.next_review_at == datetime(2026, 11, 2, 10, 0)


def test_lapse_at_easiness_floor(scheduler):
    prior = CardSchedulingState(easiness_factor=1.3, interval_days=30, repetitions=5)

    result = scheduler.compute_next_review(1, prior, at(14))

    assert result.state.repetitions == 0
    assert result.state.interval_days == 1
    assert result.state.easiness_factor == pytest.approx(1.3)
    assert result.insights[:2] == LAPSE_INSIGHTS
    assert STRENGTHENING_INSIGHT not in result.insights


# --- Quality gate ---


@pytest.mark.parametrize("quality", [0, 1, 2])
@pytest.mark.parametrize("reps", [1, 2, 7])
def test_lapse_resets_repetitions_and_interval(scheduler, quality, reps):
    prior = CardSchedulingState(easiness_factor=2.2, interval_days=40, repetitions=reps)

    result = scheduler.compute_next_review(quality, prior, at(12))

    assert result.state.repetitions == 0
    assert result.state.interval_days == 1


@pytest.mark.parametrize("easiness", [1.3, 2.0, 2.8])
def test_first_two_successes_use_fixed_intervals(scheduler, easiness):
    prior = CardSchedulingState(easiness_factor=easiness)

    first = scheduler.compute_next_review(3, prior, at(12))
    second = scheduler.compute_next_review(5, first.state, at(12))

    assert (first.state.repetitions, first.state.interval_days) == (1, 1)
    assert (second.state.repetitions, second.state.interval_days) == (2, 6)


def test_interval_rounds_half_up(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5, interval_days=5, repetitions=3)

    result = scheduler.compute_next_review(4, prior, at(12))

    # 5 * 2.5 = 12.5
    assert result.state.interval_days == 13


def test_interval_capped_at_180_days(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5, interval_days=100, repetitions=4)

    result = scheduler.compute_next_review(4, prior, at(12))

    assert result.state.interval_days == 180
    assert result.insights[:2] == LONG_TERM_INSIGHTS


def test_zero_prior_interval_still_schedules_at_least_one_day(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5, interval_days=0, repetitions=5)

    result = scheduler.compute_next_review(4, prior, at(12))

    assert result.state.interval_days == 1


# --- Bonuses and clamping ---


def test_pre_sleep_bonus(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5)

    result = scheduler.compute_next_review(4, prior, at(22))

    assert result.bonus == pytest.approx(0.05)
    assert result.state.easiness_factor == pytest.approx(2.55)
    assert PRE_SLEEP_INSIGHT in result.insights
    assert PEAK_INSIGHT not in result.insights


def test_easiness_ceiling(scheduler):
    prior = CardSchedulingState(easiness_factor=2.8)

    result = scheduler.compute_next_review(5, prior, at(9))

    assert result.state.easiness_factor == pytest.approx(2.8)


def test_out_of_band_prior_easiness_is_clamped(scheduler):
    prior = CardSchedulingState(easiness_factor=3.6, interval_days=10, repetitions=3)

    result = scheduler.compute_next_review(4, prior, at(12))

    assert result.state.easiness_factor == pytest.approx(2.8)
    assert result.state.interval_days == 28


def test_results_stay_within_bounds_for_any_prior():
    scheduler = ReviewScheduler()
    priors = [
        CardSchedulingState(easiness_factor=ef, interval_days=iv, repetitions=reps)
        for ef, iv, reps in product([1.3, 1.7, 2.5, 2.8], [0, 1, 6, 45, 180], [0, 1, 2, 3, 9])
    ]
    for prior, quality, hour in product(priors, range(6), [3, 10, 14, 16, 22]):
        state = scheduler.compute_next_review(quality, prior, at(hour)).state
        assert 1.3 <= state.easiness_factor <= 2.8
        assert 1 <= state.interval_days <= 180
        if prior.repetitions >= 2 and quality >= 3:
            expected = min(180, max(1, int(prior.interval_days * state.easiness_factor + 0.5)))
            assert state.interval_days == expected


# --- Next due timestamp ---


@pytest.mark.parametrize("hour,minute", [(0, 5), (10, 30), (23, 59)])
def test_next_review_pinned_to_ten_oclock(scheduler, hour, minute):
    now = at(hour, minute)

    result = scheduler.compute_next_review(2, CardSchedulingState(), now)

    assert result.state.next_review_at == datetime(2026, 10, 18, 10, 0, 0)
    assert result.state.last_reviewed_at == now


def test_next_review_keeps_timezone():
    tz = timezone(timedelta(hours=2))
    now = datetime(2026, 10, 17, 16, 0, tzinfo=tz)

    result = compute_next_review(3, CardSchedulingState(), now)

    assert result.state.next_review_at == datetime(2026, 10, 18, 10, 0, tzinfo=tz)


def test_custom_preferred_hour():
    result = ReviewScheduler(preferred_hour=8).compute_next_review(
        4, CardSchedulingState(), at(12)
    )
    assert result.state.next_review_at.hour == 8


def test_invalid_preferred_hour():
    with pytest.raises(ValueError):
        ReviewScheduler(preferred_hour=24)


# --- Validation and purity ---


@pytest.mark.parametrize("quality", [-1, 6, 4.5, 4.0, True, "3", None])
def test_invalid_quality_is_rejected(scheduler, quality):
    with pytest.raises(InvalidQuality):
        scheduler.compute_next_review(quality, CardSchedulingState(), at(12))


def test_review_quality_enum_accepted(scheduler):
    result = scheduler.compute_next_review(ReviewQuality.PERFECT, CardSchedulingState(), at(12))
    assert result.assessment == ASSESSMENTS[5]


def test_prior_is_untouched_and_card_id_carried(scheduler):
    prior = CardSchedulingState(easiness_factor=2.5, interval_days=6, repetitions=2, card_id="x")

    result = scheduler.compute_next_review(5, prior, at(12))

    assert prior == CardSchedulingState(
        easiness_factor=2.5, interval_days=6, repetitions=2, card_id="x"
    )
    assert result.state.card_id == "x"


def test_same_inputs_same_result(scheduler):
    prior = CardSchedulingState(easiness_factor=2.1, interval_days=12, repetitions=4)
    assert scheduler.compute_next_review(3, prior, at(16)) == scheduler.compute_next_review(
        3, prior, at(16)
    )
