# Scheduling engine package
from .difficulty import DifficultyUpdater, clamp_difficulty
from .intervals import IntervalPlanner
from .risk_model import RiskModel
from .stages import StageTransition, StageTransitionEngine

__all__ = [
    "DifficultyUpdater",
    "IntervalPlanner",
    "RiskModel",
    "StageTransition",
    "StageTransitionEngine",
    "clamp_difficulty",
]
