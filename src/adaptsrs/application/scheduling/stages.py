"""
Cognitive-stage state machine.

ACQUISITION -> FIXATION -> CONSOLIDATION -> RETENTION, plus LAPSE, which is
entered by failing any consolidated stage and left by the next success.
"""

import logging
from dataclasses import dataclass

from adaptsrs.domain.constants import (
    BASE_MULTIPLIER,
    DIFFICULTY_WEIGHT,
    FIXATION_STABILITY_EASY,
    FIXATION_STABILITY_GOOD,
    LAPSE_RETENTION,
    MIN_GROWTH_MULTIPLIER,
    MIN_LAPSE_STABILITY,
)
from adaptsrs.domain.models import STAGE_RANK, CognitiveStage, Grade
from adaptsrs.domain.parameters import EngineParameters

logger = logging.getLogger(__name__)

GRADE_BONUS = {
    Grade.HARD: 0.8,
    Grade.GOOD: 1.0,
    Grade.EASY: 1.3,
}


@dataclass(frozen=True)
class StageTransition:
    """Stage and stability after one review."""

    stage: CognitiveStage
    stability: float


class StageTransitionEngine:
    """Derives the next stage and stability for a graded review."""

    def __init__(self, params: EngineParameters | None = None):
        self.params = params or EngineParameters()

    def transition(
        self,
        stage: CognitiveStage,
        stability: float,
        grade: Grade,
        new_difficulty: float,
        fatigue: float,
    ) -> StageTransition:
        """
        Apply one review.

        Args:
            stage: Stage before the review.
            stability: Stability before the review.
            grade: Grade given.
            new_difficulty: Difficulty already updated for this review.
            fatigue: Session fatigue at the moment of the answer.
        """
        if Grade(grade) == Grade.AGAIN:
            result = self._on_failure(stage, stability, new_difficulty, fatigue)
        else:
            result = self._on_success(stage, stability, Grade(grade), new_difficulty)

        if result.stage != stage:
            logger.debug(f"Stage {stage.value} -> {result.stage.value} (S={result.stability:.2f})")
        return result

    def _on_failure(
        self,
        stage: CognitiveStage,
        stability: float,
        new_difficulty: float,
        fatigue: float,
    ) -> StageTransition:
        if stage == CognitiveStage.ACQUISITION:
            return StageTransition(stage, 0.0)

        fatigue_factor = (
            1.0 - self.params.fatigue_impact if fatigue > self.params.fatigue_threshold else 1.0
        )
        retention_factor = LAPSE_RETENTION * (1.0 - new_difficulty) * fatigue_factor
        new_stability = max(MIN_LAPSE_STABILITY, stability * retention_factor)
        return StageTransition(CognitiveStage.LAPSE, new_stability)

    def _on_success(
        self,
        stage: CognitiveStage,
        stability: float,
        grade: Grade,
        new_difficulty: float,
    ) -> StageTransition:
        if stage == CognitiveStage.ACQUISITION:
            if grade == Grade.HARD:
                return StageTransition(stage, 0.0)
            initial = FIXATION_STABILITY_EASY if grade == Grade.EASY else FIXATION_STABILITY_GOOD
            return StageTransition(CognitiveStage.FIXATION, initial)

        difficulty_mod = 1.0 / (1.0 + new_difficulty * DIFFICULTY_WEIGHT)
        multiplier = max(MIN_GROWTH_MULTIPLIER, BASE_MULTIPLIER * difficulty_mod * GRADE_BONUS[grade])
        new_stability = stability * multiplier

        new_stage = stage
        if stage == CognitiveStage.LAPSE:
            new_stage = CognitiveStage.FIXATION
        earned = self._stage_for_stability(new_stability)
        if earned is not None and STAGE_RANK[earned] > STAGE_RANK[new_stage]:
            new_stage = earned
        return StageTransition(new_stage, new_stability)

    def _stage_for_stability(self, stability: float) -> CognitiveStage | None:
        if stability > self.params.retention_threshold_days:
            return CognitiveStage.RETENTION
        if stability > self.params.consolidation_threshold_days:
            return CognitiveStage.CONSOLIDATION
        if stability > self.params.fixation_threshold_days:
            return CognitiveStage.FIXATION
        return None
