"""
Review Service — Application layer orchestrator.

Drives one review loop step: load a card's state, schedule it, store the
result. All scheduling arithmetic lives in ReviewScheduler.
"""

import logging
from datetime import datetime

from kairos.domain.scheduling.errors import CardNotFound
from kairos.domain.scheduling.models import CardSchedulingState, ReviewResult
from kairos.domain.scheduling.ports import CardStateRepository

from .due_selector import due_queue
from .review_scheduler import ReviewScheduler, validate_quality

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for reviewing stored cards.

    Depends on the CardStateRepository abstraction, not on a concrete store.
    """

    def __init__(
        self,
        repo: CardStateRepository,
        scheduler: ReviewScheduler | None = None,
    ):
        """
        Args:
            repo: The repository (port) holding card states.
            scheduler: Optional custom scheduler; uses default if not provided.
        """
        self._repo = repo
        self._scheduler = scheduler or ReviewScheduler()

    async def add_card(self, card_id: str) -> CardSchedulingState:
        """
        Register a new card with default scheduling state.

        Raises:
            ValueError: If the card already exists.
        """
        try:
            await self._repo.get(card_id)
        except CardNotFound:
            state = CardSchedulingState.new(card_id)
            await self._repo.save(state)
            logger.info(f"Added card {card_id}")
            return state
        raise ValueError(f"Card already exists: {card_id}")

    async def review(self, card_id: str, quality: int, now: datetime) -> ReviewResult:
        """
        Apply a review to a stored card and persist the new state.

        Raises:
            InvalidQuality: Before any storage access, if quality is invalid.
            CardNotFound: If the card is unknown.
        """
        validate_quality(quality)
        prior = await self._repo.get(card_id)
        result = self._scheduler.compute_next_review(quality, prior, now)
        await self._repo.save(result.state)
        logger.info(
            f"Reviewed {card_id} (q={quality}): next in {result.state.interval_days}d "
            f"at {result.state.next_review_at.isoformat()}"
        )
        return result

    async def due_cards(self, now: datetime, limit: int | None = None) -> list[CardSchedulingState]:
        """
        Stored cards due at ``now``, most overdue first.
        """
        cards = await self._repo.list_all()
        return due_queue(cards, now, limit=limit)
