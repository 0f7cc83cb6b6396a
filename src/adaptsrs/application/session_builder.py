"""
Session builder for risk-ranked study queues.

Builds ordered study queues by:
1. Dropping suspended cards and cards outside the deck scope
2. Scoring each remaining card with a selection strategy
3. Sorting by priority (highest first) and truncating to the limit
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from adaptsrs.application.explanations import Explanation, explain
from adaptsrs.application.scheduling import RiskModel
from adaptsrs.domain.constants import (
    DEFAULT_SESSION_LIMIT,
    FOCUS_NEW_CARD_PRIORITY,
    NEW_CARD_PRIORITY,
    OVERDUE_BOOST,
)
from adaptsrs.domain.models import Card
from adaptsrs.domain.parameters import EngineParameters
from adaptsrs.domain.ports import Clock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A card accepted by a strategy, with its ranking inputs."""

    card: Card
    risk: float
    priority: float
    is_new: bool


@dataclass(frozen=True)
class CardPresentation:
    card: Card
    priority_score: float
    explanation: Explanation


class SelectionStrategy(ABC):
    """Decides whether a card belongs in the queue and how urgently."""

    name: str = ""

    @abstractmethod
    def assess(self, card: Card, risk: float, now: datetime) -> Candidate | None:
        """
        Score one card.

        Returns:
            A Candidate if the card should be studied, None to leave it out.
        """
        pass


class DueStrategy(SelectionStrategy):
    """
    Default session queue: new cards and cards whose review time has come.

    Priority is 2.0 for new cards, risk + 0.5 for overdue cards, else risk.
    """

    name = "due"

    def assess(self, card: Card, risk: float, now: datetime) -> Candidate | None:
        is_new = card.is_new
        is_due = card.next_review is None or card.next_review <= now
        if not (is_new or is_due):
            return None

        if is_new:
            priority = NEW_CARD_PRIORITY
        elif card.next_review is not None and card.next_review < now:
            priority = risk + OVERDUE_BOOST
        else:
            priority = risk
        return Candidate(card=card, risk=risk, priority=priority, is_new=is_new)


class FocusStrategy(SelectionStrategy):
    """
    Focus queue: only cards that break the safe-risk contract.

    Includes new cards and cards whose risk exceeds `max_risk`, ranked by risk
    regardless of their scheduled time.
    """

    name = "focus"

    def __init__(self, max_risk: float):
        self.max_risk = max_risk

    def assess(self, card: Card, risk: float, now: datetime) -> Candidate | None:
        is_new = card.is_new
        if not (is_new or risk > self.max_risk):
            return None
        priority = FOCUS_NEW_CARD_PRIORITY if is_new else risk
        return Candidate(card=card, risk=risk, priority=priority, is_new=is_new)


def strategy_for(name: str, params: EngineParameters) -> SelectionStrategy:
    if name == FocusStrategy.name:
        return FocusStrategy(params.max_risk)
    if name == DueStrategy.name:
        return DueStrategy()
    raise ValueError(f"Unknown selection strategy: {name}")


class SessionBuilder:
    """Ranks a collection into a bounded, priority-ordered study queue."""

    def __init__(
        self,
        params: EngineParameters | None = None,
        clock: Clock | None = None,
        strategy: SelectionStrategy | None = None,
    ):
        if clock is None:
            from adaptsrs.infrastructure.clock import SystemClock

            clock = SystemClock()

        self.params = params or EngineParameters()
        self.clock = clock
        self.strategy = strategy or DueStrategy()
        self.risk_model = RiskModel(self.params)

    def build(
        self,
        cards: Iterable[Card],
        deck_ids: Iterable[str] | None = None,
        limit: int = DEFAULT_SESSION_LIMIT,
        now: datetime | None = None,
    ) -> list[CardPresentation]:
        """
        Build the study queue.

        Args:
            cards: The full collection.
            deck_ids: Decks to study (already expanded to descendants), or None for all.
            limit: Maximum queue length.
            now: Session start; defaults to the injected clock.

        Returns:
            Presentations sorted by priority, highest first. Ties keep input order.
        """
        if now is None:
            now = self.clock.now()
        scope = set(deck_ids) if deck_ids else None

        candidates: list[Candidate] = []
        for card in cards:
            if card.suspended:
                continue
            if scope is not None and card.deck_id not in scope:
                continue
            risk = self.risk_model.current_risk(card, now)
            candidate = self.strategy.assess(card, risk, now)
            if candidate is not None:
                candidates.append(candidate)

        candidates.sort(key=lambda c: c.priority, reverse=True)
        selected = candidates[: max(0, limit)]

        logger.debug(
            f"[{self.strategy.name}] {len(candidates)} eligible, {len(selected)} queued"
        )

        return [
            CardPresentation(
                card=c.card,
                priority_score=c.priority,
                explanation=explain(c.card, c.risk, c.is_new, now),
            )
            for c in selected
        ]
