"""Card creation: ids, initial memory state, and note expansion."""

import re
from datetime import datetime

from ulid import ULID

from adaptsrs.domain.models import (
    Card,
    CardContent,
    ClozeContent,
    Metrics,
    PlainContent,
    ReversedContent,
)

CLOZE_RE = re.compile(r"{{c(\d+)::(.*?)}}")
CLOZE_MARKER = "{{c"


def generate_card_id() -> str:
    """Generate a stable card ID using ULID."""
    return f"card_{ULID()}"


def new_card(
    deck_id: str,
    front: str,
    back: str,
    now: datetime,
    content: CardContent | None = None,
    tags: list[str] | None = None,
) -> Card:
    """Create a card in ACQUISITION with stability 0, difficulty 0.3 and no history."""
    return Card(
        id=generate_card_id(),
        deck_id=deck_id,
        front=front,
        back=back,
        content=content or PlainContent(),
        metrics=Metrics(last_review=now),
        created_at=now,
        tags=list(tags or []),
        status="new",
        next_review=now,
    )


def cloze_indices(*texts: str) -> list[int]:
    """Distinct cloze indices found in the texts, in ascending order."""
    found: set[int] = set()
    for text in texts:
        found.update(int(m.group(1)) for m in CLOZE_RE.finditer(text))
    return sorted(found)


def has_cloze_marker(front: str, back: str) -> bool:
    return CLOZE_MARKER in front or CLOZE_MARKER in back


def expand_card(
    deck_id: str,
    front: str,
    back: str,
    now: datetime,
    content: CardContent | None = None,
    tags: list[str] | None = None,
) -> list[Card]:
    """
    Create every card a note authors.

    - Cloze notes produce one card per distinct index (plain if none parse).
    - Reversed notes also produce the swapped plain card.
    - Anything else produces a single card.
    """
    content = content or PlainContent()

    if isinstance(content, ClozeContent):
        indices = cloze_indices(front, back)
        if not indices:
            return [new_card(deck_id, front, back, now, PlainContent(), tags)]
        return [new_card(deck_id, front, back, now, ClozeContent(index=i), tags) for i in indices]

    cards = [new_card(deck_id, front, back, now, content, tags)]
    if isinstance(content, ReversedContent):
        cards.append(new_card(deck_id, back, front, now, PlainContent(), tags))
    return cards
