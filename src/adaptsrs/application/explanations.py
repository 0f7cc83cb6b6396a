"""Human-readable cues for queued cards and scheduling feedback."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from adaptsrs.domain.constants import CRITICAL_RISK, DEFAULT_MAX_RISK, IMMINENT_FORGETTING_RISK
from adaptsrs.domain.models import Card, CognitiveStage, Grade, VisualCue


@dataclass(frozen=True)
class Explanation:
    message: str
    visual_cue: VisualCue


@dataclass(frozen=True)
class StatusLabel:
    text: str
    visual_cue: VisualCue


def is_overdue(card: Card, now: datetime) -> bool:
    return card.next_review is not None and card.next_review < now


def explain(card: Card, risk: float, is_new: bool, now: datetime) -> Explanation:
    """Explain why a card is in the study queue."""
    if is_new:
        return Explanation("New concept.", VisualCue.NEW)
    if card.stage == CognitiveStage.LAPSE:
        return Explanation("Recent lapse.", VisualCue.CRITICAL)

    if is_overdue(card, now):
        if risk > IMMINENT_FORGETTING_RISK:
            return Explanation("Forgetting is imminent.", VisualCue.CRITICAL)
        return Explanation("Review pending.", VisualCue.WARNING)

    return Explanation("Ahead of schedule (cram).", VisualCue.SAFE)


def status_label(card: Card, risk: float, max_risk: float = DEFAULT_MAX_RISK) -> StatusLabel:
    """Badge for a card in browse views; does not change state."""
    if card.stage == CognitiveStage.ACQUISITION:
        return StatusLabel("New", VisualCue.NEW)
    if card.stage == CognitiveStage.LAPSE:
        return StatusLabel("Lapse", VisualCue.CRITICAL)
    if risk > CRITICAL_RISK:
        return StatusLabel("Urgent", VisualCue.CRITICAL)
    if risk > max_risk:
        return StatusLabel("Review", VisualCue.WARNING)
    return StatusLabel("Safe", VisualCue.SAFE)


def format_delay(delay: timedelta) -> str:
    minutes = delay.total_seconds() / 60.0
    hours = minutes / 60.0
    if minutes < 60:
        return f"{round(minutes)}m"
    if hours < 24:
        return f"{round(hours)}h"
    days = round(hours / 24.0)
    return f"{days} day" if days == 1 else f"{days} days"


def scheduling_feedback(grade: Grade, stage: CognitiveStage, delay: timedelta) -> str:
    """Short message shown after an answer, e.g. "Scheduled for 3 days"."""
    if stage == CognitiveStage.ACQUISITION:
        if grade == Grade.AGAIN:
            return "Missed it? It will come back in a moment."
        return "Learning... reviewing again soon."

    if grade == Grade.AGAIN:
        return "Reset to learn again"
    return f"Scheduled for {format_delay(delay)}"
