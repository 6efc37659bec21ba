"""Errors raised by the scheduling core."""

from typing import Any


class InvalidQuality(ValueError):
    """A review rating outside 0-5 or not an integer.

    Ratings come straight from a person, so they are rejected rather than
    clamped.
    """

    def __init__(self, quality: Any):
        self.quality = quality
        super().__init__(f"Review quality must be an integer between 0 and 5, got {quality!r}")


class CardNotFound(KeyError):
    """No stored scheduling state for the requested card id."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(card_id)

    def __str__(self) -> str:
        return f"Card not found: {self.card_id}"
