"""Safe-interval planning from stability and a target risk."""

import math

from adaptsrs.domain.constants import RETRIEVABILITY_ANCHOR
from adaptsrs.domain.parameters import EngineParameters


class IntervalPlanner:
    def __init__(self, params: EngineParameters | None = None):
        self.params = params or EngineParameters()

    def safe_interval_days(self, stability: float, target_risk: float | None = None) -> float:
        """
        Days until the projected risk reaches `target_risk`.

        multiplier = ln(1 - target_risk) / ln(0.9). At the default 10% target
        the multiplier is exactly 1, so the interval equals the stability.
        """
        if target_risk is None:
            target_risk = self.params.max_risk

        retention_target = 1.0 - target_risk
        if math.isclose(retention_target, RETRIEVABILITY_ANCHOR):
            multiplier = 1.0
        else:
            multiplier = math.log(retention_target) / math.log(RETRIEVABILITY_ANCHOR)
        return stability * multiplier
