"""
Service Factory
Centralizes wiring of the persistence adapter and the scheduler from config.
"""

from kairos.application.config import AppConfig
from kairos.application.scheduler.review_scheduler import ReviewScheduler
from kairos.application.scheduler.service import ReviewService
from kairos.domain.scheduling.ports import CardStateRepository
from kairos.infrastructure.adapters.json_repository import JsonCardRepository


def get_card_repository(config: AppConfig) -> CardStateRepository:
    """
    Returns the CardStateRepository implementation for the configured deck.
    """
    return JsonCardRepository(config.deck_path)


def get_review_service(config: AppConfig) -> ReviewService:
    """
    Returns a ReviewService wired to the configured deck and review hour.
    """
    return ReviewService(
        get_card_repository(config),
        scheduler=ReviewScheduler(preferred_hour=config.preferred_review_hour),
    )
