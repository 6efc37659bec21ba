"""
Due-card selection and ordering.

Works on any objects exposing a ``next_review_at`` attribute (usually
CardSchedulingState). A missing due date means the card was never reviewed
and is always due.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import TypeVar

CardT = TypeVar("CardT")


def is_due(card, now: datetime) -> bool:
    due_at = getattr(card, "next_review_at", None)
    return due_at is None or due_at <= now


def select_due(cards: Iterable[CardT], now: datetime) -> list[CardT]:
    """
    Return the cards due at ``now``, in their original order.

    Applying this twice with the same ``now`` changes nothing.
    """
    return [card for card in cards if is_due(card, now)]


def _due_sort_key(card):
    due_at = getattr(card, "next_review_at", None)
    # Never-reviewed cards count as the most overdue
    if due_at is None:
        return (0, 0)
    return (1, due_at)


def sort_by_due_date(cards: Iterable[CardT]) -> list[CardT]:
    """
    Stable ascending sort by due date; cards without one come first.
    """
    return sorted(cards, key=_due_sort_key)


def due_queue(cards: Iterable[CardT], now: datetime, limit: int | None = None) -> list[CardT]:
    """
    Build a review session queue: due cards, most overdue first.

    Args:
        cards: Candidate cards.
        now: Reference time for the due check.
        limit: Optional cap on queue length.
    """
    queue = sort_by_due_date(select_due(cards, now))
    if limit is not None:
        queue = queue[: max(0, limit)]
    return queue
