"""
JSON Card Repository — Infrastructure adapter for a single-file deck.

Implements CardStateRepository by keeping every card record in one JSON
document. Writes go through a temporary file and an atomic replace.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from kairos.application.scheduler.records import state_from_record, state_to_record
from kairos.domain.scheduling.errors import CardNotFound
from kairos.domain.scheduling.models import CardSchedulingState
from kairos.domain.scheduling.ports import CardStateRepository

logger = logging.getLogger(__name__)


class JsonCardRepository(CardStateRepository):
    """
    Stores card scheduling state in a JSON file.

    File layout: ``{"cards": [record, ...]}`` where each record uses the
    storage shape from ``state_to_record``. A missing file is an empty deck.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Deck file {self.path} is not valid JSON: {e}") from e
        return list(data.get("cards", []))

    def _dump(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".deck-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"cards": records}, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def get(self, card_id: str) -> CardSchedulingState:
        for record in self._load():
            if str(record.get("id")) == card_id:
                return state_from_record(record)
        raise CardNotFound(card_id)

    async def save(self, state: CardSchedulingState) -> None:
        if state.card_id is None:
            raise ValueError("Cannot store a card state without a card_id")

        records = self._load()
        record = state_to_record(state)
        for i, existing in enumerate(records):
            if str(existing.get("id")) == state.card_id:
                records[i] = record
                break
        else:
            records.append(record)

        self._dump(records)
        logger.debug(f"Saved card {state.card_id} to {self.path}")

    async def list_all(self) -> list[CardSchedulingState]:
        return [state_from_record(record) for record in self._load()]
