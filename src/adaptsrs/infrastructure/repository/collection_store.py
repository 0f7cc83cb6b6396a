"""
YAML collection store.

Implements CollectionRepository with a single YAML document holding the
learner's cards and decks.
"""

import logging
from pathlib import Path

import yaml
from pydantic import TypeAdapter

from adaptsrs.domain.models import Collection
from adaptsrs.domain.ports import CollectionRepository

logger = logging.getLogger(__name__)

_COLLECTION = TypeAdapter(Collection)


class CollectionStore(CollectionRepository):
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Collection:
        if not self.path.exists():
            logger.info(f"No collection at {self.path}; starting empty")
            return Collection()

        data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        collection = _COLLECTION.validate_python(data)
        logger.debug(
            f"Loaded {len(collection.cards)} cards, {len(collection.decks)} decks from {self.path}"
        )
        return collection

    def save(self, collection: Collection) -> None:
        data = _COLLECTION.dump_python(collection, mode="json")
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic replace
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False),
            encoding="utf-8",
        )
        tmp.replace(self.path)
        logger.debug(f"Saved {len(collection.cards)} cards to {self.path}")
