import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from kairos.application.scheduler.due_selector import due_queue
from kairos.application.scheduler.policies import (
    schedule_for,
    score_state,
    study_recommendations,
)
from kairos.application.scheduler.review_scheduler import ReviewScheduler
from kairos.consts import VERSION
from kairos.domain.constants import DEFAULT_EASINESS
from kairos.domain.scheduling.errors import InvalidQuality
from kairos.domain.scheduling.models import CardSchedulingState

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("kairos.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"kairos server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("kairos server shutting down...")


app = FastAPI(
    title="kairos",
    description="Stateless SM-2 review scheduling API.",
    version=VERSION,
    lifespan=lifespan,
)

scheduler = ReviewScheduler()
start_time = time.time()


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardState(BaseModel):
    """Wire shape of a card's scheduling state."""

    card_id: str | None = None
    easiness_factor: float = Field(default=DEFAULT_EASINESS, gt=0)
    interval_days: int = Field(default=0, ge=0)
    repetitions: int = Field(default=0, ge=0)
    next_review_at: datetime | None = None
    last_reviewed_at: datetime | None = None

    def to_domain(self) -> CardSchedulingState:
        return CardSchedulingState(**self.model_dump())

    @classmethod
    def from_domain(cls, state: CardSchedulingState) -> "CardState":
        return cls(
            card_id=state.card_id,
            easiness_factor=state.easiness_factor,
            interval_days=state.interval_days,
            repetitions=state.repetitions,
            next_review_at=state.next_review_at,
            last_reviewed_at=state.last_reviewed_at,
        )


class ReviewRequest(BaseModel):
    # Raw JSON value; the scheduler judges the rating, not pydantic coercion
    quality: Any
    card: CardState = Field(default_factory=CardState)
    now: datetime | None = None


class ReviewResponse(BaseModel):
    card: CardState
    assessment: str
    insights: list[str]
    timing_hint: str


class DueRequest(BaseModel):
    cards: list[CardState]
    now: datetime | None = None
    limit: int | None = None


class StateScoreRequest(BaseModel):
    hour: int = Field(ge=0, le=23)
    energy: str = "medium"
    focus: str = "neutral"
    stress: str = "medium"


class StateScoreResponse(BaseModel):
    score: int
    recommendations: list[str]


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.post("/review", response_model=ReviewResponse)
async def review_card(req: ReviewRequest):
    """
    Compute a card's next scheduling state. Nothing is stored.
    """
    now = req.now or datetime.now()
    try:
        result = scheduler.compute_next_review(req.quality, req.card.to_domain(), now)
    except InvalidQuality as e:
        logger.warning(f"Rejected review: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    return ReviewResponse(
        card=CardState.from_domain(result.state),
        assessment=result.assessment,
        insights=result.insights,
        timing_hint=result.timing_hint,
    )


@app.post("/due", response_model=list[CardState])
async def due_cards(req: DueRequest):
    """Filter to due cards, most overdue first."""
    now = req.now or datetime.now()
    cards = [c.to_domain() for c in req.cards]
    try:
        queue = due_queue(cards, now, limit=req.limit)
    except TypeError as e:
        # Mixed naive and timezone-aware timestamps
        raise HTTPException(status_code=422, detail=str(e)) from e
    return [CardState.from_domain(c) for c in queue]


@app.get("/schedule/{difficulty}")
async def get_schedule(difficulty: str):
    try:
        return {"difficulty": difficulty, "days": schedule_for(difficulty)}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@app.post("/state-score", response_model=StateScoreResponse)
async def state_score(req: StateScoreRequest):
    try:
        score = score_state(req.hour, req.energy, req.focus, req.stress)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return StateScoreResponse(score=score, recommendations=study_recommendations(score))
