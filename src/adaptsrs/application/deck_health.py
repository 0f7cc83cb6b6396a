"""Deck health: share of overdue or high-risk cards, and stage distribution."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from adaptsrs.application.explanations import is_overdue
from adaptsrs.application.scheduling import RiskModel
from adaptsrs.domain.constants import ATTENTION_SCORE, HEALTHY_SCORE
from adaptsrs.domain.models import Card, CognitiveStage
from adaptsrs.domain.parameters import EngineParameters
from adaptsrs.domain.ports import Clock


@dataclass(frozen=True)
class StageDistribution:
    new: int = 0
    learning: int = 0
    review: int = 0
    suspended: int = 0


@dataclass(frozen=True)
class DeckHealth:
    deck_id: str
    health_score: int  # 0-100
    status_message: str
    distribution: StageDistribution


def _status_message(score: int) -> str:
    if score < ATTENTION_SCORE:
        return "Many overdue"
    if score < HEALTHY_SCORE:
        return "Needs attention"
    return "Healthy"


class DeckHealthAnalyzer:
    def __init__(self, params: EngineParameters | None = None, clock: Clock | None = None):
        if clock is None:
            from adaptsrs.infrastructure.clock import SystemClock

            clock = SystemClock()

        self.params = params or EngineParameters()
        self.clock = clock
        self.risk_model = RiskModel(self.params)

    def analyze(
        self,
        cards: Iterable[Card],
        deck_id: str,
        descendant_ids: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> DeckHealth:
        """
        Score a deck and its descendants.

        A card is critical when it is overdue or its risk exceeds the critical
        threshold. Score = 100 - round(100 * critical / total); an empty deck
        scores 100.
        """
        if now is None:
            now = self.clock.now()
        target_ids = {deck_id, *(descendant_ids or ())}
        deck_cards = [c for c in cards if c.deck_id in target_ids]

        if not deck_cards:
            return DeckHealth(deck_id, 100, "Empty", StageDistribution())

        counts = {"new": 0, "learning": 0, "review": 0, "suspended": 0}
        critical = 0
        for card in deck_cards:
            if card.suspended:
                counts["suspended"] += 1
            elif card.stage == CognitiveStage.ACQUISITION:
                counts["new"] += 1
            elif card.stage == CognitiveStage.FIXATION:
                counts["learning"] += 1
            else:
                counts["review"] += 1

            risk = self.risk_model.current_risk(card, now)
            if is_overdue(card, now) or risk > self.params.critical_risk:
                critical += 1

        # Half-up rounding of the critical share
        critical_pct = int(100 * critical / len(deck_cards) + 0.5)
        score = max(0, 100 - critical_pct)
        return DeckHealth(deck_id, score, _status_message(score), StageDistribution(**counts))
