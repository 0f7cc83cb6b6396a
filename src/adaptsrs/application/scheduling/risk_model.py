"""
Forgetting-risk model.

Risk is the modeled probability that a card has been forgotten right now:
risk = 1 - retrievability. Consolidated cards follow a decay anchored at
90% retrievability after one stability unit; cards still being acquired
follow a short-term curve with a half-life in minutes.
"""

from datetime import datetime

from adaptsrs.domain.constants import RETRIEVABILITY_ANCHOR, SHORT_TERM_GRACE_MINUTES
from adaptsrs.domain.models import Card, CognitiveStage
from adaptsrs.domain.parameters import EngineParameters

SECONDS_PER_DAY = 86400.0


class RiskModel:
    """
    Computes a card's current forgetting risk.

    Stateless and side-effect free.
    """

    def __init__(self, params: EngineParameters | None = None):
        self.params = params or EngineParameters()

    def current_risk(self, card: Card, now: datetime) -> float:
        """
        Return the risk in [0, 1] that the card is forgotten at `now`.

        Short-term:  risk = 1 - 0.5^(minutes / half_life), 0 under one minute.
        Long-term:   risk = 1 - 0.9^(days / (stability / complexity)).
        """
        metrics = card.metrics
        if card.stage == CognitiveStage.ACQUISITION or metrics.stability <= 0:
            return self._short_term_risk(metrics.last_review, now)

        days_elapsed = (now - metrics.last_review).total_seconds() / SECONDS_PER_DAY
        effective_stability = metrics.stability / metrics.complexity
        retrievability = RETRIEVABILITY_ANCHOR ** (days_elapsed / effective_stability)
        return min(1.0, max(0.0, 1.0 - retrievability))

    def retrievability(self, card: Card, now: datetime) -> float:
        return 1.0 - self.current_risk(card, now)

    def _short_term_risk(self, last_review: datetime, now: datetime) -> float:
        minutes_elapsed = (now - last_review).total_seconds() / 60.0
        if minutes_elapsed < SHORT_TERM_GRACE_MINUTES:
            return 0.0
        half_life = self.params.short_term_half_life_minutes
        return 1.0 - 0.5 ** (minutes_elapsed / half_life)
