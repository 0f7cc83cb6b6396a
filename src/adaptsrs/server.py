import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from ulid import ULID

from adaptsrs.application import factory
from adaptsrs.application.config import AppConfig, resolve_config
from adaptsrs.application.decks import DeckTree
from adaptsrs.application.portability import export_text, import_text
from adaptsrs.application.review_processor import StudySession
from adaptsrs.consts import VERSION
from adaptsrs.domain.errors import (
    CardNotFoundError,
    DeckNotFoundError,
    ImportFormatError,
    SessionNotFoundError,
)
from adaptsrs.domain.ports import Clock, CollectionRepository
from adaptsrs.infrastructure.clock import SystemClock

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("adaptsrs.server")

# One StudySession per active study session; fatigue is never shared.
_sessions: dict[str, StudySession] = {}
# Oldest sessions are dropped once this many are open.
MAX_OPEN_SESSIONS = 256


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"adaptsrs server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info(f"adaptsrs server shutting down ({len(_sessions)} open sessions dropped)")
    _sessions.clear()


app = FastAPI(
    title="adaptsrs",
    description="Adaptive spaced-repetition scheduling API.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


# ---------- Dependencies ----------


def get_config() -> AppConfig:
    return resolve_config()


def get_store(config: AppConfig = Depends(get_config)) -> CollectionRepository:
    return factory.get_store(config)


def get_clock() -> Clock:
    return SystemClock()


def _get_session(session_id: str) -> StudySession:
    try:
        return _sessions[session_id]
    except KeyError:
        raise SessionNotFoundError(session_id) from None


# ---------- Models ----------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class ExplanationModel(BaseModel):
    message: str
    visual_cue: Literal["critical", "warning", "safe", "new"]


class PresentationModel(BaseModel):
    card_id: str
    deck_id: str
    front: str
    back: str
    stage: str
    priority_score: float
    explanation: ExplanationModel


class StartSessionRequest(BaseModel):
    deck_ids: list[str] | None = None  # Sub-decks are included
    limit: int | None = Field(default=None, ge=1)
    strategy: Literal["due", "focus"] = "due"


class SessionResponse(BaseModel):
    session_id: str
    queue: list[PresentationModel]


class AnswerRequest(BaseModel):
    card_id: str
    grade: int = Field(ge=1, le=4)
    time_to_recall: float = Field(default=10.0, ge=0.0)


class AnswerResponse(BaseModel):
    card_id: str
    feedback: str
    stage: str
    next_review: datetime | None
    interval: int
    session_fatigue: float


class SummaryResponse(BaseModel):
    cards_reviewed: int
    retention_rate: int
    session_fatigue: int
    fatigue_message: str


class DistributionModel(BaseModel):
    new: int
    learning: int
    review: int
    suspended: int


class DeckHealthResponse(BaseModel):
    deck_id: str
    health_score: int
    status_message: str
    distribution: DistributionModel


class ImportRequest(BaseModel):
    content: str


class ImportResponse(BaseModel):
    imported: int
    decks_created: int
    message: str


# ---------- Endpoints ----------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.post("/sessions", response_model=SessionResponse)
async def start_session(
    req: StartSessionRequest,
    config: AppConfig = Depends(get_config),
    store: CollectionRepository = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Open a study session and return its queue."""
    collection = store.load()

    scope: list[str] | None = None
    if req.deck_ids:
        tree = DeckTree(collection.decks)
        try:
            scope = [i for deck_id in req.deck_ids for i in tree.family_ids(deck_id)]
        except DeckNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e

    builder = factory.get_session_builder(config, strategy=req.strategy, clock=clock)
    queue = builder.build(collection.cards, deck_ids=scope, limit=req.limit or config.session_limit)

    session_id = str(ULID())
    while len(_sessions) >= MAX_OPEN_SESSIONS:
        stale = next(iter(_sessions))
        del _sessions[stale]
        logger.info(f"Session {stale} dropped: too many open sessions")
    _sessions[session_id] = StudySession()
    logger.info(f"Session {session_id} started with {len(queue)} cards")

    return SessionResponse(
        session_id=session_id,
        queue=[
            PresentationModel(
                card_id=p.card.id,
                deck_id=p.card.deck_id,
                front=p.card.front,
                back=p.card.back,
                stage=p.card.stage.value,
                priority_score=p.priority_score,
                explanation=ExplanationModel(
                    message=p.explanation.message,
                    visual_cue=p.explanation.visual_cue.value,
                ),
            )
            for p in queue
        ],
    )


@app.post("/sessions/{session_id}/answers", response_model=AnswerResponse)
async def answer(
    session_id: str,
    req: AnswerRequest,
    config: AppConfig = Depends(get_config),
    store: CollectionRepository = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Register an answer within a session and persist the updated card."""
    try:
        session = _get_session(session_id)
        collection = store.load()
        card = collection.get_card(req.card_id)
    except (SessionNotFoundError, CardNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    processor = factory.get_review_processor(config, clock=clock)
    result = processor.register_answer(card, req.grade, req.time_to_recall, session)
    collection.replace_card(result.card)
    store.save(collection)

    return AnswerResponse(
        card_id=result.card.id,
        feedback=result.feedback,
        stage=result.card.stage.value,
        next_review=result.card.next_review,
        interval=result.card.interval,
        session_fatigue=session.fatigue,
    )


@app.get("/sessions/{session_id}/summary", response_model=SummaryResponse)
async def session_summary(session_id: str):
    try:
        summary = _get_session(session_id).summary()
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return SummaryResponse(**asdict(summary))


@app.delete("/sessions/{session_id}", response_model=SummaryResponse)
async def end_session(session_id: str):
    """Close a session, returning its final summary."""
    try:
        summary = _get_session(session_id).summary()
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    del _sessions[session_id]
    return SummaryResponse(**asdict(summary))


@app.get("/decks/{deck_id}/health", response_model=DeckHealthResponse)
async def deck_health(
    deck_id: str,
    config: AppConfig = Depends(get_config),
    store: CollectionRepository = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    collection = store.load()
    try:
        family = DeckTree(collection.decks).family_ids(deck_id)
    except DeckNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    result = factory.get_health_analyzer(config, clock=clock).analyze(
        collection.cards, deck_id, family
    )
    d = result.distribution
    return DeckHealthResponse(
        deck_id=result.deck_id,
        health_score=result.health_score,
        status_message=result.status_message,
        distribution=DistributionModel(
            new=d.new, learning=d.learning, review=d.review, suspended=d.suspended
        ),
    )


@app.post("/import", response_model=ImportResponse)
async def import_collection(
    req: ImportRequest,
    store: CollectionRepository = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Import an Anki text export."""
    collection = store.load()
    try:
        result = import_text(collection, req.content, clock.now())
    except ImportFormatError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    store.save(collection)
    return ImportResponse(
        imported=len(result.cards), decks_created=result.decks_created, message=result.message
    )


@app.get("/export", response_class=PlainTextResponse)
async def export_collection(
    deck_id: str | None = None,
    store: CollectionRepository = Depends(get_store),
):
    """Export as an Anki-compatible text file."""
    collection = store.load()
    try:
        return export_text(collection, deck_id)
    except DeckNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
