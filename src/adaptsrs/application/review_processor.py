"""
Review processing: one graded answer in, one updated card out.

Orchestrates the difficulty update, the stage transition and interval planning,
and accounts for session fatigue through an explicit StudySession value.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from adaptsrs.application.explanations import scheduling_feedback
from adaptsrs.application.scheduling import (
    DifficultyUpdater,
    IntervalPlanner,
    RiskModel,
    StageTransitionEngine,
)
from adaptsrs.domain.constants import (
    FATIGUE_COST_AGAIN,
    FATIGUE_COST_DEFAULT,
    FATIGUE_COST_HARD,
)
from adaptsrs.domain.models import Card, CognitiveStage, Grade, ReviewLog
from adaptsrs.domain.parameters import EngineParameters
from adaptsrs.domain.ports import Clock

logger = logging.getLogger(__name__)

FATIGUE_COST = {
    Grade.AGAIN: FATIGUE_COST_AGAIN,
    Grade.HARD: FATIGUE_COST_HARD,
    Grade.GOOD: FATIGUE_COST_DEFAULT,
    Grade.EASY: FATIGUE_COST_DEFAULT,
}


@dataclass(frozen=True)
class SessionSummary:
    cards_reviewed: int
    retention_rate: int  # Percent of answers graded good or easy
    session_fatigue: int  # Percent
    fatigue_message: str


@dataclass
class StudySession:
    """
    State of one active study session.

    Owned by exactly one session; never share an instance between
    concurrently active sessions.
    """

    fatigue: float = 0.0
    reviewed_count: int = 0
    correct_count: int = 0

    def record_answer(self, grade: Grade) -> float:
        """Account for one answer and return the fatigue after it."""
        grade = Grade(grade)
        self.reviewed_count += 1
        if grade >= Grade.GOOD:
            self.correct_count += 1
        self.fatigue = min(1.0, self.fatigue + FATIGUE_COST[grade])
        return self.fatigue

    def summary(self) -> SessionSummary:
        if self.reviewed_count > 0:
            retention_rate = round(100 * self.correct_count / self.reviewed_count)
        else:
            retention_rate = 100

        message = "Fresh mind."
        if self.fatigue > 0.5:
            message = "Slightly tired."
        if self.fatigue > 0.8:
            message = "High fatigue. Take a break."

        return SessionSummary(
            cards_reviewed=self.reviewed_count,
            retention_rate=retention_rate,
            session_fatigue=round(self.fatigue * 100),
            fatigue_message=message,
        )


@dataclass(frozen=True)
class ReviewResult:
    card: Card
    feedback: str
    safe_interval_days: float


class ReviewProcessor:
    """
    Applies graded answers to cards.

    The input card is never mutated; the result carries an updated copy with
    one more history entry.
    """

    def __init__(
        self,
        params: EngineParameters | None = None,
        clock: Clock | None = None,
    ):
        if clock is None:
            from adaptsrs.infrastructure.clock import SystemClock

            clock = SystemClock()

        self.params = params or EngineParameters()
        self.clock = clock
        self.risk_model = RiskModel(self.params)
        self.difficulty = DifficultyUpdater()
        self.stages = StageTransitionEngine(self.params)
        self.planner = IntervalPlanner(self.params)

    def register_answer(
        self,
        card: Card,
        grade: Grade,
        time_to_recall: float,
        session: StudySession,
        now: datetime | None = None,
    ) -> ReviewResult:
        """Charge the answer to the session, then review with the updated fatigue."""
        fatigue = session.record_answer(grade)
        return self.review(card, grade, time_to_recall, fatigue, now=now)

    def review(
        self,
        card: Card,
        grade: Grade,
        time_to_recall: float,
        fatigue: float,
        now: datetime | None = None,
    ) -> ReviewResult:
        """
        Process one review.

        Args:
            card: Card being answered.
            grade: 1 (again) to 4 (easy).
            time_to_recall: Response latency in seconds.
            fatigue: Session fatigue in [0, 1] at the moment of the answer.
            now: Review instant; defaults to the injected clock.

        Returns:
            ReviewResult with the updated card and a feedback message.
        """
        if now is None:
            now = self.clock.now()
        grade = Grade(grade)
        metrics = card.metrics

        pre_review_risk = self.risk_model.current_risk(card, now)
        new_difficulty = self.difficulty.update(
            metrics.difficulty, grade, time_to_recall, card.variant
        )
        transition = self.stages.transition(
            card.stage, metrics.stability, grade, new_difficulty, fatigue
        )

        if transition.stage == CognitiveStage.ACQUISITION:
            next_review = now + timedelta(minutes=self._acquisition_step(grade))
            safe_interval_days = 0.0
        else:
            safe_interval_days = self.planner.safe_interval_days(transition.stability)
            next_review = now + timedelta(days=safe_interval_days)

        entry = ReviewLog(
            timestamp=now,
            grade=grade,
            time_to_recall=time_to_recall,
            fatigue=fatigue,
            pre_review_stability=metrics.stability,
            pre_review_difficulty=metrics.difficulty,
            calculated_risk=pre_review_risk,
        )

        updated = replace(
            card,
            stage=transition.stage,
            next_review=next_review,
            interval=int(safe_interval_days + 0.5),
            repetitions=card.repetitions + 1,
            tags=list(card.tags),
            status="learning" if transition.stage == CognitiveStage.ACQUISITION else "review",
            metrics=replace(
                metrics,
                difficulty=new_difficulty,
                stability=transition.stability,
                last_review=now,
                history=[*metrics.history, entry],
            ),
        )

        logger.debug(
            f"Reviewed {card.id}: grade={grade.name} D={new_difficulty:.2f} "
            f"S={transition.stability:.2f} next={next_review.isoformat()}"
        )
        feedback = scheduling_feedback(grade, transition.stage, next_review - now)
        return ReviewResult(card=updated, feedback=feedback, safe_interval_days=safe_interval_days)

    def _acquisition_step(self, grade: Grade) -> float:
        if grade == Grade.AGAIN:
            return self.params.acquisition_again_minutes
        if grade == Grade.HARD:
            return self.params.acquisition_hard_minutes
        return self.params.acquisition_base_minutes
