"""
Domain models for review scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from kairos.domain.constants import DEFAULT_EASINESS, PASSING_QUALITY


class ReviewQuality(IntEnum):
    """Self-reported recall performance for a single review."""

    BLACKOUT = 0  # Complete blackout, total failure
    INCORRECT = 1  # Incorrect response, barely remembered
    RECOGNIZED = 2  # Incorrect but recognized the answer
    DIFFICULT = 3  # Correct with significant difficulty
    HESITANT = 4  # Correct with some hesitation
    PERFECT = 5  # Perfect recall

    @property
    def is_lapse(self) -> bool:
        return self < PASSING_QUALITY


@dataclass(frozen=True)
class CardSchedulingState:
    """
    Scheduling state of a single card.

    Attributes:
        easiness_factor: Multiplier driving interval growth (kept in 1.3-2.8).
        interval_days: Days until the next review after the latest one.
        repetitions: Consecutive successful reviews since the last lapse.
        next_review_at: When the card becomes due. None means never reviewed.
        last_reviewed_at: Time of the most recent review.
        card_id: Persistence key; the scheduler carries it through untouched.
    """

    easiness_factor: float = DEFAULT_EASINESS
    interval_days: int = 0
    repetitions: int = 0
    next_review_at: datetime | None = None
    last_reviewed_at: datetime | None = None
    card_id: str | None = None

    def __post_init__(self):
        if self.interval_days < 0:
            raise ValueError(f"interval_days must be non-negative, got {self.interval_days}")
        if self.repetitions < 0:
            raise ValueError(f"repetitions must be non-negative, got {self.repetitions}")
        if self.easiness_factor <= 0:
            raise ValueError(f"easiness_factor must be positive, got {self.easiness_factor}")

    @classmethod
    def new(cls, card_id: str | None = None) -> "CardSchedulingState":
        """State for a freshly authored card."""
        return cls(card_id=card_id)


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of one review: the next state plus feedback for the learner."""

    state: CardSchedulingState
    assessment: str
    insights: list[str] = field(default_factory=list)
    timing_hint: str = ""
    bonus: float = 0.0  # Total time-of-day bonus added to the easiness delta
