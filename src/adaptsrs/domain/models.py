"""
Domain models for cards, decks and their memory state.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Literal, Union

from .constants import DEFAULT_COMPLEXITY, DEFAULT_DIFFICULTY
from .errors import CardNotFoundError


class Grade(IntEnum):
    """Answer quality on the 4-point ordinal scale."""

    AGAIN = 1  # Retrieval failed
    HARD = 2  # Retrieved with high effort
    GOOD = 3  # Retrieved normally
    EASY = 4  # Retrieved fluently


class CognitiveStage(str, Enum):
    """Memorization maturity of a card."""

    ACQUISITION = "acquisition"
    FIXATION = "fixation"
    CONSOLIDATION = "consolidation"
    RETENTION = "retention"
    LAPSE = "lapse"


# Ordering used when upgrading by stability. LAPSE sits outside the ladder.
STAGE_RANK = {
    CognitiveStage.ACQUISITION: 0,
    CognitiveStage.LAPSE: 0,
    CognitiveStage.FIXATION: 1,
    CognitiveStage.CONSOLIDATION: 2,
    CognitiveStage.RETENTION: 3,
}


class VisualCue(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    SAFE = "safe"
    NEW = "new"


# ---------- Content variants ----------


@dataclass(frozen=True)
class PlainContent:
    kind: Literal["plain"] = "plain"


@dataclass(frozen=True)
class ReversedContent:
    kind: Literal["reversed"] = "reversed"


@dataclass(frozen=True)
class ClozeContent:
    index: int
    kind: Literal["cloze"] = "cloze"


@dataclass(frozen=True)
class TypedAnswerContent:
    kind: Literal["typed"] = "typed"


@dataclass(frozen=True)
class OcclusionRect:
    """Rectangle hiding part of an image. Coordinates are percentages."""

    id: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ImageOcclusionContent:
    image_url: str
    rects: list[OcclusionRect] = field(default_factory=list)
    target_rect_id: str | None = None
    kind: Literal["image_occlusion"] = "image_occlusion"


@dataclass(frozen=True)
class AudioContent:
    front_audio: str | None = None  # Base64 clip
    back_audio: str | None = None
    kind: Literal["audio"] = "audio"


CardContent = Union[
    PlainContent,
    ReversedContent,
    ClozeContent,
    TypedAnswerContent,
    ImageOcclusionContent,
    AudioContent,
]


# ---------- Memory state ----------


@dataclass(frozen=True)
class ReviewLog:
    """
    A single review log entry.

    Attributes:
        timestamp: When the answer was registered.
        grade: Grade given by the learner.
        time_to_recall: Response latency in seconds.
        fatigue: Session fatigue at the moment of the answer.
        pre_review_stability: Stability before this review.
        pre_review_difficulty: Difficulty before this review.
        calculated_risk: Forgetting risk right before this review.
    """

    timestamp: datetime
    grade: Grade
    time_to_recall: float
    fatigue: float
    pre_review_stability: float
    pre_review_difficulty: float
    calculated_risk: float


@dataclass
class Metrics:
    """
    Memory model parameters for a card.

    Attributes:
        last_review: Reference instant for decay (creation time for new cards).
        difficulty: Perceived difficulty in [0.1, 1.0], higher is harder.
        stability: Days until retrievability decays to 90%.
        complexity: Static divisor applied to stability in the risk formula.
        history: Append-only review log.
    """

    last_review: datetime
    difficulty: float = DEFAULT_DIFFICULTY
    stability: float = 0.0
    complexity: float = DEFAULT_COMPLEXITY
    history: list[ReviewLog] = field(default_factory=list)


@dataclass
class Card:
    id: str
    deck_id: str
    front: str
    back: str
    metrics: Metrics
    created_at: datetime
    content: CardContent = field(default_factory=PlainContent)
    stage: CognitiveStage = CognitiveStage.ACQUISITION
    tags: list[str] = field(default_factory=list)
    suspended: bool = False

    # Denormalized scheduling fields
    next_review: datetime | None = None
    interval: int = 0  # Days
    repetitions: int = 0
    status: str = "new"

    @property
    def is_new(self) -> bool:
        """Never consolidated: still acquiring and without stability."""
        return self.stage == CognitiveStage.ACQUISITION and self.metrics.stability == 0

    @property
    def variant(self) -> str:
        return self.content.kind


@dataclass
class Deck:
    id: str
    title: str
    parent_id: str | None = None
    created_at: datetime | None = None


@dataclass
class Collection:
    """All cards and decks owned by one learner."""

    cards: list[Card] = field(default_factory=list)
    decks: list[Deck] = field(default_factory=list)

    def get_card(self, card_id: str) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    def replace_card(self, updated: Card) -> None:
        for i, card in enumerate(self.cards):
            if card.id == updated.id:
                self.cards[i] = updated
                return
        raise CardNotFoundError(updated.id)


# ---------- Interop records ----------


@dataclass
class AnkiRow:
    """One row of an Anki delimited-text export."""

    deck_path: str
    front: str
    back: str
    tags: list[str] = field(default_factory=list)
    interval: float | None = None  # Days


@dataclass(frozen=True)
class AnkiNoteProgress:
    """
    Scheduling state of a note read from Anki.

    Attributes:
        queue: 0=new, 1=learning, 2=review, 3=day learning, -1=suspended, -2=buried.
        ease: SM-2 factor (e.g., 2500 = 250%).
    """

    id: str
    front: str
    back: str
    deck_name: str
    interval: int
    ease: int
    lapses: int
    reps: int
    queue: int
