"""Deck hierarchy helpers: descendants, full paths and path resolution."""

import logging
from datetime import datetime

from ulid import ULID

from adaptsrs.domain.constants import DECK_PATH_SEPARATOR, DEFAULT_IMPORT_DECK
from adaptsrs.domain.errors import DeckNotFoundError
from adaptsrs.domain.models import Deck

logger = logging.getLogger(__name__)


def generate_deck_id() -> str:
    return f"deck_{ULID()}"


def split_deck_path(path: str) -> list[str]:
    return [s.strip() for s in path.split(DECK_PATH_SEPARATOR) if s.strip()]


class DeckTree:
    """
    View over a list of decks linked by parent ids.

    `ensure_path` appends newly created decks to the list it was given.
    """

    def __init__(self, decks: list[Deck]):
        self.decks = decks

    def get(self, deck_id: str) -> Deck:
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        raise DeckNotFoundError(deck_id)

    def children(self, deck_id: str | None) -> list[Deck]:
        return [d for d in self.decks if d.parent_id == deck_id]

    def family_ids(self, deck_id: str) -> list[str]:
        """The deck itself followed by all of its descendants."""
        self.get(deck_id)
        ids: list[str] = []
        stack = [deck_id]
        while stack:
            current = stack.pop()
            if current in ids:
                continue
            ids.append(current)
            stack.extend(d.id for d in reversed(self.children(current)))
        return ids

    def full_path(self, deck_id: str) -> str:
        """Return "Parent::Child" for a deck, or the import deck if unknown."""
        titles: list[str] = []
        seen: set[str] = set()
        current: str | None = deck_id
        while current is not None and current not in seen:
            seen.add(current)
            try:
                deck = self.get(current)
            except DeckNotFoundError:
                if not titles:
                    logger.warning(f"Unknown deck {deck_id}; exporting as '{DEFAULT_IMPORT_DECK}'")
                    return DEFAULT_IMPORT_DECK
                break
            titles.append(deck.title)
            current = deck.parent_id
        return DECK_PATH_SEPARATOR.join(reversed(titles))

    def ensure_path(self, path: str, now: datetime | None = None) -> str:
        """
        Resolve a "::"-delimited path to a deck id, creating missing decks.

        Existing decks are matched by (title, parent). An empty path resolves
        to the import deck.
        """
        segments = split_deck_path(path) or [DEFAULT_IMPORT_DECK]
        parent_id: str | None = None

        for title in segments:
            found = next(
                (d for d in self.decks if d.title == title and d.parent_id == parent_id),
                None,
            )
            if found is None:
                found = Deck(id=generate_deck_id(), title=title, parent_id=parent_id, created_at=now)
                self.decks.append(found)
                logger.debug(f"Created deck '{title}' ({found.id})")
            parent_id = found.id

        return parent_id  # type: ignore[return-value]
