"""
Ports (interfaces) for time and storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Collection


class Clock(ABC):
    """
    Port for reading the current instant.

    Implementations:
        - SystemClock: the wall clock, in UTC.
        - FixedClock: a settable instant for tests and simulated time.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware instant."""
        pass


class CollectionRepository(ABC):
    """Port for loading and saving a learner's collection."""

    @abstractmethod
    def load(self) -> Collection:
        """
        Load the collection.

        Returns:
            The stored collection, or an empty one if nothing is stored yet.
        """
        pass

    @abstractmethod
    def save(self, collection: Collection) -> None:
        """Persist the whole collection, replacing what was stored."""
        pass
