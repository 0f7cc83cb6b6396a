# Domain Package
from .errors import (
    AdaptSrsError,
    CardNotFoundError,
    DeckNotFoundError,
    ImportFormatError,
    SessionNotFoundError,
)
from .models import (
    AnkiNoteProgress,
    AnkiRow,
    AudioContent,
    Card,
    CardContent,
    ClozeContent,
    CognitiveStage,
    Collection,
    Deck,
    Grade,
    ImageOcclusionContent,
    Metrics,
    OcclusionRect,
    PlainContent,
    ReversedContent,
    ReviewLog,
    TypedAnswerContent,
    VisualCue,
)
from .parameters import EngineParameters

__all__ = [
    "AdaptSrsError",
    "CardNotFoundError",
    "DeckNotFoundError",
    "ImportFormatError",
    "SessionNotFoundError",
    "AnkiNoteProgress",
    "AnkiRow",
    "AudioContent",
    "Card",
    "CardContent",
    "ClozeContent",
    "CognitiveStage",
    "Collection",
    "Deck",
    "Grade",
    "ImageOcclusionContent",
    "Metrics",
    "OcclusionRect",
    "PlainContent",
    "ReversedContent",
    "ReviewLog",
    "TypedAnswerContent",
    "VisualCue",
    "EngineParameters",
]
