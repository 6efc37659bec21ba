# Application Scheduler Package
from .due_selector import due_queue, select_due, sort_by_due_date
from .policies import is_checkpoint, schedule_for, score_state
from .review_scheduler import ReviewScheduler, compute_next_review
from .service import ReviewService

__all__ = [
    "ReviewScheduler",
    "compute_next_review",
    "select_due",
    "sort_by_due_date",
    "due_queue",
    "schedule_for",
    "score_state",
    "is_checkpoint",
    "ReviewService",
]
