"""Perceived-difficulty update rule."""

from adaptsrs.domain.constants import (
    DIFFICULTY_DRIFT,
    DIFFICULTY_MAX,
    DIFFICULTY_MIN,
    HESITATION_PENALTY,
    HESITATION_SECONDS,
)
from adaptsrs.domain.models import Grade

# Base change by grade. Positive makes the card harder.
GRADE_DELTA = {
    Grade.AGAIN: +0.20,
    Grade.HARD: +0.10,
    Grade.GOOD: -0.05,
    Grade.EASY: -0.15,
}


def clamp_difficulty(value: float) -> float:
    return min(DIFFICULTY_MAX, max(DIFFICULTY_MIN, value))


class DifficultyUpdater:
    """Revises a card's difficulty from the grade and the response latency."""

    def update(
        self,
        current: float,
        grade: Grade,
        time_to_recall: float,
        variant: str,
    ) -> float:
        """
        Return the new difficulty, clamped to [0.1, 1.0].

        Slow successful answers (over 15 s) are penalized, except on audio cards
        where the latency includes playback. A slow answer graded easy also loses
        its easy discount. Every review adds a small upward drift.
        """
        grade = Grade(grade)
        delta = GRADE_DELTA[grade]

        penalty = 0.0
        if variant != "audio" and grade >= Grade.GOOD and time_to_recall > HESITATION_SECONDS:
            penalty = HESITATION_PENALTY
            if grade == Grade.EASY:
                delta = 0.0

        return clamp_difficulty(current + delta + penalty + DIFFICULTY_DRIFT)
