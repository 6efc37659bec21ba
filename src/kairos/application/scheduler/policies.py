"""
Advisory learning policies around the scheduler.

Pure lookups and scores used by callers to seed new cards, pace study
sessions and word feedback. None of these feed back into ReviewScheduler.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Literal

from kairos.domain.constants import CHECKPOINT_EVERY

from .review_scheduler import is_peak_hour

Difficulty = Literal["easy", "medium", "hard"]
EnergyLevel = Literal["low", "medium", "high"]
FocusLevel = Literal["distracted", "neutral", "focused"]
StressLevel = Literal["high", "medium", "low"]
ContentType = Literal["definition", "process", "list", "concept", "numerical"]

SCHEDULE_TEMPLATES: dict[str, tuple[int, ...]] = {
    # Slower forgetting, standard exponential growth
    "easy": (1, 3, 7, 14, 30, 60, 120),
    "medium": (1, 4, 10, 21, 45, 90, 180),
    # Faster forgetting, more frequent early reviews
    "hard": (1, 2, 5, 12, 25, 50, 100, 180),
}

STATE_BASE_SCORE = 50
PEAK_HOUR_SCORE = 30
NIGHT_DIP_SCORE = -20
LATE_NIGHT_SCORE = -30
ENERGY_SCORES = {"high": 25, "medium": 0, "low": -25}
FOCUS_SCORES = {"focused": 25, "neutral": 0, "distracted": -25}
STRESS_SCORES = {"low": 20, "medium": 0, "high": -20}

CONFIDENCE_LABELS = {
    0: "Complete Blackout",
    1: "Barely Remembered",
    2: "Recognized",
    3: "Difficult Recall",
    4: "Some Hesitation",
    5: "Perfect Recall",
}


def schedule_for(difficulty: Difficulty) -> list[int]:
    """
    Canonical day offsets for seeding a new card of the given difficulty.

    Raises:
        ValueError: If difficulty is not easy, medium or hard.
    """
    try:
        return list(SCHEDULE_TEMPLATES[difficulty])
    except KeyError:
        raise ValueError(
            f"Unknown difficulty {difficulty!r}; expected one of {sorted(SCHEDULE_TEMPLATES)}"
        ) from None


def _lookup(table: dict[str, int], value: str, name: str) -> int:
    if value not in table:
        raise ValueError(f"Unknown {name} level {value!r}; expected one of {sorted(table)}")
    return table[value]


def score_state(
    hour: int,
    energy: EnergyLevel,
    focus: FocusLevel,
    stress: StressLevel,
) -> int:
    """
    Score how ready a learner is to study right now, from 0 to 100.

    Additive: base 50, time of day (+30 peak, -20 for 1-3h, -30 late night),
    energy +/-25, focus +/-25, stress +/-20, then clamped.
    """
    score = STATE_BASE_SCORE

    if is_peak_hour(hour):
        score += PEAK_HOUR_SCORE
    elif 1 <= hour <= 3:
        score += NIGHT_DIP_SCORE
    elif hour >= 22 or hour <= 6:
        score += LATE_NIGHT_SCORE

    score += _lookup(ENERGY_SCORES, energy, "energy")
    score += _lookup(FOCUS_SCORES, focus, "focus")
    score += _lookup(STRESS_SCORES, stress, "stress")

    return max(0, min(100, score))


def study_recommendations(score: int) -> list[str]:
    """Advice for a learning-state score."""
    if score >= 80:
        return [
            "🌟 Excellent state! Perfect for challenging material.",
            "📚 Focus on: New concepts, difficult flashcards, synthesis tasks.",
            "⏱️ Aim for: 45-60 minute deep work session.",
        ]
    if score >= 60:
        return [
            "🟢 Good state for learning.",
            "📚 Focus on: Regular reviews, practice problems.",
            "⏱️ Aim for: 25-30 minute focused sessions.",
        ]
    if score >= 40:
        return [
            "🟡 Moderate state - adjust approach.",
            "📚 Focus on: Easy reviews, familiar material.",
            "💡 Tip: Take a 5-minute walk or do light stretches first.",
        ]
    return [
        "🔴 Suboptimal state - consider rescheduling.",
        "☕ Suggestion: Take a break, hydrate, or come back during peak hours.",
        "😴 Alternative: If tired, prioritize sleep - learning happens during rest!",
    ]


def is_checkpoint(completed_count: int) -> bool:
    """True on every third completed unit of work (3, 6, 9, ...)."""
    return completed_count > 0 and completed_count % CHECKPOINT_EVERY == 0


@dataclass(frozen=True)
class StudySessionPlan:
    """Pomodoro-style session layout. Durations are in minutes."""

    focus_duration: int = 25
    short_break: int = 5
    long_break: int = 15
    sessions_before_long_break: int = 4
    optimal_times: tuple[str, ...] = ("9:00-11:00 AM", "3:00-5:00 PM")
    avoid_times: tuple[str, ...] = ("1:00-3:00 PM", "10:00 PM-6:00 AM")
    rationale: str = (
        "Cortisol and core body temperature peak 2-4 hours after waking. "
        "The post-lunch dip is caused by adenosine buildup. "
        "25-minute sessions match natural attention spans and prevent mental fatigue."
    )


def optimal_study_session() -> StudySessionPlan:
    return StudySessionPlan()


def interleaving_suggestions(current_topic: str, previous_topics: list[str]) -> list[str]:
    """Suggest mixing earlier topics into the current one."""
    if not previous_topics:
        return ["Focus on mastering this topic first."]

    return [
        f"🔄 Mix in review from: {previous_topics[-1]}",
        "🧠 Interleaving strengthens learning by forcing discrimination between concepts.",
        f"📚 Pattern: Study {current_topic} (15 min) → Review {previous_topics[0]} (5 min)"
        f" → Continue {current_topic}",
    ]


@dataclass(frozen=True)
class MemoryTechnique:
    technique: str
    description: str
    example: str


MEMORY_TECHNIQUES: dict[str, MemoryTechnique] = {
    "definition": MemoryTechnique(
        technique="Acronym + Visualization",
        description="Create an acronym and vivid mental image",
        example=(
            'For "Photosynthesis", picture a plant as a high-tech factory '
            "turning sunlight into sugar."
        ),
    ),
    "process": MemoryTechnique(
        technique="Story Method",
        description="Convert steps into a memorable narrative",
        example=(
            'For cell division: "The Cell Commander (nucleus) orders troops (chromosomes) '
            'to line up, then splits forces to conquer new territories (daughter cells)."'
        ),
    ),
    "list": MemoryTechnique(
        technique="Memory Palace",
        description="Place items in familiar locations",
        example=(
            "To remember planets: Walk through your house placing each planet in a room. "
            "Sun at front door, Mercury in hallway, etc."
        ),
    ),
    "concept": MemoryTechnique(
        technique="Analogy + Association",
        description="Link to something you already know well",
        example=(
            "Electricity is like water: Voltage = pressure, Current = flow rate, "
            "Resistance = pipe narrowness."
        ),
    ),
    "numerical": MemoryTechnique(
        technique="Chunking + Pattern",
        description="Break into groups and find patterns",
        example='For 1776: "Three sevens minus one, then six (1-7-7-6)."',
    ),
}


def memory_technique_for(content_type: ContentType) -> MemoryTechnique:
    try:
        return MEMORY_TECHNIQUES[content_type]
    except KeyError:
        raise ValueError(
            f"Unknown content type {content_type!r}; expected one of {sorted(MEMORY_TECHNIQUES)}"
        ) from None


def confidence_label(rating: int) -> str:
    """Short label for a 0-5 rating, "Unknown" for anything else."""
    return CONFIDENCE_LABELS.get(rating, "Unknown")


@dataclass(frozen=True)
class StreakSummary:
    current: int = 0
    longest: int = 0
    active_days: list[date] = field(default_factory=list)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def compute_streaks(activity: Iterable[date | datetime], today: date) -> StreakSummary:
    """
    Current and longest runs of consecutive active days.

    The current streak stays alive if the latest activity was today or
    yesterday; it counts back one day at a time from there.
    """
    days = sorted({_as_date(item) for item in activity})
    if not days:
        return StreakSummary()

    longest = 1
    run = 1
    for prev, curr in zip(days, days[1:]):
        if curr - prev == timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    current = 0
    active = set(days)
    yesterday = today - timedelta(days=1)
    cursor = today if today in active else yesterday if yesterday in active else None
    while cursor is not None and cursor in active:
        current += 1
        cursor -= timedelta(days=1)

    return StreakSummary(current=current, longest=longest, active_days=days)


def streak_message(streak: int) -> str:
    if streak == 0:
        return "Start your learning streak today"
    if streak == 1:
        return "Great start! Keep it going"
    if streak < 3:
        return "Building momentum"
    if streak < 7:
        return "You're on fire"
    if streak < 30:
        return "Unstoppable streak"
    return "Master of consistency"
