"""
Import/export bridge with Anki.

Import turns delimited-text rows (or Anki note progress) into cards, creating
decks along "::" paths and seeding memory state from any known interval.
Export writes one row per distinct (deck, front, back).
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from adaptsrs.application.cards import expand_card, has_cloze_marker, new_card
from adaptsrs.application.decks import DeckTree
from adaptsrs.application.scheduling import clamp_difficulty
from adaptsrs.domain.constants import ANKI_IMPORT_TAG, RETENTION_IMPORT_INTERVAL_DAYS
from adaptsrs.domain.errors import ImportFormatError
from adaptsrs.domain.models import (
    AnkiNoteProgress,
    AnkiRow,
    Card,
    CardContent,
    ClozeContent,
    CognitiveStage,
    Collection,
    PlainContent,
)
from adaptsrs.infrastructure.adapters.anki_text import parse_anki_export, render_anki_export

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    cards: list[Card] = field(default_factory=list)
    decks_created: int = 0

    @property
    def message(self) -> str:
        return f"{len(self.cards)} cards imported successfully"


def detect_content(front: str, back: str) -> CardContent:
    """Cloze if either side carries a cloze marker, plain otherwise."""
    if has_cloze_marker(front, back):
        return ClozeContent(index=0)
    return PlainContent()


def apply_progress(card: Card, interval: float | None, now: datetime) -> Card:
    """
    Seed memory state from a known review interval (days).

    Intervals up to 21 days land in CONSOLIDATION, longer ones in RETENTION.
    """
    if not interval or interval <= 0:
        return card

    stage = (
        CognitiveStage.RETENTION
        if interval > RETENTION_IMPORT_INTERVAL_DAYS
        else CognitiveStage.CONSOLIDATION
    )
    return replace(
        card,
        stage=stage,
        next_review=now + timedelta(days=interval),
        interval=int(interval + 0.5),
        status="review",
        metrics=replace(card.metrics, stability=float(interval)),
    )


def import_rows(collection: Collection, rows: list[AnkiRow], now: datetime) -> ImportResult:
    """
    Add the cards described by `rows` to the collection.

    Raises:
        ImportFormatError: if there are no rows to import.
    """
    if not rows:
        raise ImportFormatError(
            "No valid rows found. Check the file format and separator (;)."
        )

    tree = DeckTree(collection.decks)
    decks_before = len(collection.decks)
    result = ImportResult()

    for row in rows:
        deck_id = tree.ensure_path(row.deck_path, now=now)
        content = detect_content(row.front, row.back)
        for card in expand_card(deck_id, row.front, row.back, now, content, row.tags):
            result.cards.append(apply_progress(card, row.interval, now))

    collection.cards.extend(result.cards)
    result.decks_created = len(collection.decks) - decks_before
    logger.info(f"Imported {len(result.cards)} cards ({result.decks_created} new decks)")
    return result


def import_text(collection: Collection, content: str, now: datetime) -> ImportResult:
    """Parse an Anki text export and import it; zero parsed rows is an error."""
    return import_rows(collection, parse_anki_export(content), now)


def export_rows(collection: Collection, deck_id: str | None = None) -> list[AnkiRow]:
    """
    Rows for every distinct (deck, front, back), first card wins.

    With `deck_id`, only that deck and its descendants are exported.
    """
    tree = DeckTree(collection.decks)
    cards = collection.cards
    if deck_id is not None:
        family = set(tree.family_ids(deck_id))
        cards = [c for c in cards if c.deck_id in family]

    seen: set[tuple[str, str, str]] = set()
    rows: list[AnkiRow] = []
    for card in cards:
        key = (card.deck_id, card.front, card.back)
        if key in seen:
            continue
        seen.add(key)
        rows.append(
            AnkiRow(
                deck_path=tree.full_path(card.deck_id),
                front=card.front,
                back=card.back,
                tags=list(card.tags),
            )
        )
    return rows


def export_text(collection: Collection, deck_id: str | None = None) -> str:
    rows = export_rows(collection, deck_id)
    logger.info(f"Exporting {len(rows)} notes")
    return render_anki_export(rows)


def map_anki_note(note: AnkiNoteProgress, deck_id: str, now: datetime) -> Card:
    """
    Rebuild a card's memory state from Anki's scheduling data.

    Ease 2500 (250%) maps to difficulty 0.375; the 130% floor to about 0.68.
    """
    if note.queue == 0:
        stage = CognitiveStage.ACQUISITION
    elif note.queue in (1, 3):
        stage = CognitiveStage.FIXATION
    elif note.queue == 2:
        stage = (
            CognitiveStage.RETENTION
            if note.interval > RETENTION_IMPORT_INTERVAL_DAYS
            else CognitiveStage.CONSOLIDATION
        )
    elif note.lapses > 0 and note.interval <= 1:
        stage = CognitiveStage.LAPSE
    else:
        stage = CognitiveStage.ACQUISITION

    difficulty = clamp_difficulty(1.0 - (note.ease / 1000.0) / 4.0)
    stability = float(note.interval) if note.interval > 0 else 0.0

    card = new_card(deck_id, note.front, note.back, now, tags=[ANKI_IMPORT_TAG])
    return replace(
        card,
        id=f"anki_{note.id}",
        stage=stage,
        repetitions=note.reps,
        suspended=note.queue == -1,
        metrics=replace(card.metrics, difficulty=difficulty, stability=stability),
    )
