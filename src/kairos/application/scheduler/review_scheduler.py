"""
Enhanced SM-2 review scheduler.

Computes the next scheduling state of a card from a quality rating, the
card's prior state and the time of the review. This is a pure computation
module with no I/O: the caller persists the returned state.
"""

import logging
import math
from datetime import datetime, time, timedelta
from numbers import Integral

from kairos.domain.constants import (
    EASINESS_PRECISION,
    FIRST_INTERVAL,
    LONG_TERM_INTERVAL,
    MAX_EASINESS,
    MAX_INTERVAL,
    MAX_QUALITY,
    MIN_EASINESS,
    MIN_INTERVAL,
    MIN_QUALITY,
    PASSING_QUALITY,
    PEAK_BONUS,
    PEAK_WINDOWS,
    PRE_SLEEP_BONUS,
    PRE_SLEEP_WINDOW,
    PREFERRED_REVIEW_HOUR,
    SECOND_INTERVAL,
    STRENGTHENING_QUALITY,
)
from kairos.domain.scheduling.errors import InvalidQuality
from kairos.domain.scheduling.models import CardSchedulingState, ReviewResult

logger = logging.getLogger(__name__)

ASSESSMENTS = {
    0: "🚨 Total blackout - needs reteaching from scratch",
    1: "⚠️ Wrong answer - review immediately and create memory hook",
    2: "🛠️ Recognized but couldn't recall - practice active retrieval",
    3: "🟡 Correct with effort - good progress, keep practicing!",
    4: "🟢 Easy recall - excellent retention, neural pathway strong!",
    5: "🌟 Perfect recall - mastered! Knowledge is in long-term memory.",
}

LAPSE_INSIGHTS = [
    "❌ Reset: Review tomorrow. This is normal - the forgetting curve is steep initially.",
    "💡 Tip: Try creating a memory hook or visual association for this card.",
]
FIRST_STEP_INSIGHTS = [
    "✅ Great start! Your brain will consolidate this during sleep.",
    "🔄 Next review: Tomorrow, while the memory is still fresh.",
]
SECOND_STEP_INSIGHTS = [
    "💪 Strong retention! The spacing effect is working.",
    "🧠 Your neural pathways are strengthening.",
]
LONG_TERM_INSIGHTS = [
    "🌟 Excellent! This knowledge is becoming long-term memory.",
    "📅 Long interval means strong retention.",
]
STRENGTHENING_INSIGHT = "🧠 Your myelin sheath is strengthening around these neural pathways!"
PEAK_INSIGHT = "⏰ Great timing! Your circadian rhythm is at peak cognitive performance."
PRE_SLEEP_INSIGHT = "🌙 Reviewing before sleep helps your brain consolidate this overnight."

PEAK_TIMING_HINT = "Perfect timing! You're in a peak learning state."
OFF_PEAK_TIMING_HINT = "Try reviewing during 9-11 AM or 3-5 PM for best results."


def validate_quality(quality) -> int:
    """
    Return quality as a plain int, or raise InvalidQuality.

    Bools and non-integral numbers are rejected, as is anything outside 0-5.
    """
    if isinstance(quality, bool) or not isinstance(quality, Integral):
        raise InvalidQuality(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQuality(quality)
    return int(quality)


def easiness_delta(quality: int) -> float:
    """Classic SM-2 easiness change: negative below 4, zero at 4, positive at 5."""
    miss = MAX_QUALITY - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


def _in_window(hour: int, window: tuple[int, int]) -> bool:
    start, end = window
    return start <= hour <= end


def is_peak_hour(hour: int) -> bool:
    return any(_in_window(hour, window) for window in PEAK_WINDOWS)


def is_pre_sleep_hour(hour: int) -> bool:
    return _in_window(hour, PRE_SLEEP_WINDOW)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value, low, high):
    return max(low, min(high, value))


class ReviewScheduler:
    """
    Enhanced SM-2 scheduler.

    Stateless and side-effect free; one instance can be shared freely.
    """

    def __init__(self, preferred_hour: int = PREFERRED_REVIEW_HOUR):
        """
        Args:
            preferred_hour: Hour of day (0-23) every next review is queued at.
        """
        if not 0 <= preferred_hour <= 23:
            raise ValueError(f"preferred_hour must be between 0 and 23, got {preferred_hour}")
        self.preferred_hour = preferred_hour

    def compute_next_review(
        self,
        quality: int,
        prior: CardSchedulingState,
        now: datetime,
    ) -> ReviewResult:
        """
        Compute the next scheduling state for a card.

        Args:
            quality: Rating 0-5 given by the learner.
            prior: The card's current scheduling state.
            now: Time of the review. Drives the time-of-day bonus and the
                next due date.

        Returns:
            ReviewResult with the next state, the assessment and insights.

        Raises:
            InvalidQuality: If quality is not an integer in 0-5.
        """
        quality = validate_quality(quality)
        insights: list[str] = []

        # 1. Time-of-day bonus
        peak = is_peak_hour(now.hour)
        pre_sleep = is_pre_sleep_hour(now.hour)
        bonus = (PEAK_BONUS if peak else 0.0) + (PRE_SLEEP_BONUS if pre_sleep else 0.0)

        # 2. Easiness factor
        easiness = prior.easiness_factor + easiness_delta(quality) + bonus
        easiness = round(_clamp(easiness, MIN_EASINESS, MAX_EASINESS), EASINESS_PRECISION)

        # 3. Quality gate
        if quality < PASSING_QUALITY:
            repetitions = 0
            interval = MIN_INTERVAL
            insights.extend(LAPSE_INSIGHTS)
        else:
            repetitions = prior.repetitions + 1
            if repetitions == 1:
                interval = FIRST_INTERVAL
                insights.extend(FIRST_STEP_INSIGHTS)
            elif repetitions == 2:
                interval = SECOND_INTERVAL
                insights.extend(SECOND_STEP_INSIGHTS)
            else:
                interval = _round_half_up(prior.interval_days * easiness)
                interval = _clamp(interval, MIN_INTERVAL, MAX_INTERVAL)
                if interval > LONG_TERM_INTERVAL:
                    insights.extend(LONG_TERM_INSIGHTS)

        # 4. Next due date, pinned to the preferred hour
        next_review_at = datetime.combine(
            now.date() + timedelta(days=interval),
            time(hour=self.preferred_hour),
            tzinfo=now.tzinfo,
        )

        # 5. Feedback
        if quality >= STRENGTHENING_QUALITY:
            insights.append(STRENGTHENING_INSIGHT)
        if peak:
            insights.append(PEAK_INSIGHT)
        if pre_sleep:
            insights.append(PRE_SLEEP_INSIGHT)

        state = CardSchedulingState(
            easiness_factor=easiness,
            interval_days=interval,
            repetitions=repetitions,
            next_review_at=next_review_at,
            last_reviewed_at=now,
            card_id=prior.card_id,
        )

        logger.debug(
            "Scheduled card %s: q=%d ef=%.2f->%.2f interval=%d reps=%d bonus=%.2f",
            prior.card_id,
            quality,
            prior.easiness_factor,
            easiness,
            interval,
            repetitions,
            bonus,
        )

        return ReviewResult(
            state=state,
            assessment=ASSESSMENTS[quality],
            insights=insights,
            timing_hint=PEAK_TIMING_HINT if peak else OFF_PEAK_TIMING_HINT,
            bonus=round(bonus, EASINESS_PRECISION),
        )


_default_scheduler = ReviewScheduler()


def compute_next_review(
    quality: int,
    prior: CardSchedulingState,
    now: datetime,
) -> ReviewResult:
    """Module-level shortcut using the default 10:00 preferred hour."""
    return _default_scheduler.compute_next_review(quality, prior, now)
