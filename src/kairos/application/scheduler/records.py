"""
Conversion between CardSchedulingState and stored card records.

Stored records have gone through several field spellings over time
(``easeFactor``, ``easinessFactor``, ``ease_factor``, ...). All of them are
accepted here, and only here; the scheduler only ever sees the canonical
state type.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kairos.domain.constants import DEFAULT_EASINESS
from kairos.domain.scheduling.models import CardSchedulingState

EASINESS_KEYS = ("easiness_factor", "easinessFactor", "easeFactor", "ease_factor")
INTERVAL_KEYS = ("interval_days", "intervalDays", "interval")
REPETITION_KEYS = ("repetitions", "review_count")
NEXT_REVIEW_KEYS = ("next_review_at", "nextReviewDate", "next_review")
LAST_REVIEW_KEYS = ("last_reviewed_at", "lastReviewDate", "last_review")
ID_KEYS = ("card_id", "id")


def _first(record: Mapping[str, Any], keys: tuple[str, ...], default: Any = None) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def as_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime; aware ones pass through."""
    return value if value.tzinfo is not None else value.astimezone()


def parse_timestamp(value: Any) -> datetime | None:
    """
    Accept a datetime, an ISO-8601 string (``Z`` suffix allowed) or None.

    Naive values are read as local time, so every returned datetime is
    timezone-aware and stored due dates always compare with each other.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_aware(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return as_aware(datetime.fromisoformat(text))
    raise TypeError(f"Cannot interpret {value!r} as a timestamp")


def state_from_record(record: Mapping[str, Any]) -> CardSchedulingState:
    """
    Build a CardSchedulingState from a stored record.

    Missing scheduling fields fall back to the new-card defaults.
    """
    card_id = _first(record, ID_KEYS)
    return CardSchedulingState(
        easiness_factor=float(_first(record, EASINESS_KEYS, DEFAULT_EASINESS)),
        interval_days=int(_first(record, INTERVAL_KEYS, 0)),
        repetitions=int(_first(record, REPETITION_KEYS, 0)),
        next_review_at=parse_timestamp(_first(record, NEXT_REVIEW_KEYS)),
        last_reviewed_at=parse_timestamp(_first(record, LAST_REVIEW_KEYS)),
        card_id=str(card_id) if card_id is not None else None,
    )


def state_to_record(state: CardSchedulingState) -> dict[str, Any]:
    """Storage shape: easiness, interval, repetition count and ISO timestamps."""
    return {
        "id": state.card_id,
        "ease_factor": state.easiness_factor,
        "interval_days": state.interval_days,
        "review_count": state.repetitions,
        "next_review": state.next_review_at.isoformat() if state.next_review_at else None,
        "last_review": state.last_reviewed_at.isoformat() if state.last_reviewed_at else None,
    }
