"""
Ports (interfaces) for scheduling state persistence.

The scheduler itself never touches storage. Application services depend on
this abstraction, and infrastructure adapters implement it.
"""

from abc import ABC, abstractmethod

from .models import CardSchedulingState


class CardStateRepository(ABC):
    """
    Port for loading and storing card scheduling state.

    Implementations:
        - JsonCardRepository: Keeps a whole deck in a single JSON file.
    """

    @abstractmethod
    async def get(self, card_id: str) -> CardSchedulingState:
        """
        Fetch the stored state for a card.

        Raises:
            CardNotFound: If no state is stored under card_id.
        """
        pass

    @abstractmethod
    async def save(self, state: CardSchedulingState) -> None:
        """
        Store a state, replacing any previous state with the same card_id.
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[CardSchedulingState]:
        """
        Return every stored state, in storage order.
        """
        pass
