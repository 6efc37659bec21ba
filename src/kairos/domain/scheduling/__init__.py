# Domain Scheduling Package
from .errors import CardNotFound, InvalidQuality
from .models import CardSchedulingState, ReviewQuality, ReviewResult
from .ports import CardStateRepository

__all__ = [
    "CardSchedulingState",
    "ReviewQuality",
    "ReviewResult",
    "InvalidQuality",
    "CardNotFound",
    "CardStateRepository",
]
