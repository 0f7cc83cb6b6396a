"""Tunable engine parameters, defaulting to the values in constants."""

from dataclasses import dataclass

from . import constants as c


@dataclass(frozen=True)
class EngineParameters:
    """
    Overridable configuration shared by every engine component.

    Built from AppConfig by the application layer; tests construct it directly
    to exercise non-default thresholds.
    """

    max_risk: float = c.DEFAULT_MAX_RISK
    short_term_half_life_minutes: float = c.SHORT_TERM_HALF_LIFE_MINUTES
    fatigue_threshold: float = c.FATIGUE_THRESHOLD
    fatigue_impact: float = c.FATIGUE_IMPACT
    retention_threshold_days: float = c.RETENTION_THRESHOLD_DAYS
    consolidation_threshold_days: float = c.CONSOLIDATION_THRESHOLD_DAYS
    fixation_threshold_days: float = c.FIXATION_THRESHOLD_DAYS
    acquisition_again_minutes: float = c.ACQUISITION_AGAIN_MINUTES
    acquisition_hard_minutes: float = c.ACQUISITION_HARD_MINUTES
    acquisition_base_minutes: float = c.ACQUISITION_BASE_MINUTES
    critical_risk: float = c.CRITICAL_RISK
