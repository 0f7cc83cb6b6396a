import math

import pytest

from adaptsrs.application.scheduling import IntervalPlanner
from adaptsrs.domain.parameters import EngineParameters


def test_default_target_gives_interval_equal_to_stability():
    assert IntervalPlanner().safe_interval_days(8.4) == 8.4


def test_other_target_risk():
    planner = IntervalPlanner()
    expected = 10.0 * math.log(0.8) / math.log(0.9)
    assert planner.safe_interval_days(10.0, target_risk=0.2) == pytest.approx(expected)
    assert expected == pytest.approx(21.179, abs=1e-3)


def test_target_from_parameters():
    planner = IntervalPlanner(EngineParameters(max_risk=0.05))
    assert planner.safe_interval_days(10.0) < 10.0


def test_zero_stability():
    assert IntervalPlanner().safe_interval_days(0.0) == 0.0


@pytest.mark.parametrize("target_risk", [0.05, 0.10, 0.3])
def test_interval_grows_with_stability(target_risk):
    planner = IntervalPlanner()
    intervals = [planner.safe_interval_days(s, target_risk) for s in (0.5, 1.0, 4.0, 30.0, 365.0)]
    assert intervals == sorted(intervals)


def test_interval_grows_with_target_risk():
    planner = IntervalPlanner()
    intervals = [planner.safe_interval_days(10.0, r) for r in (0.01, 0.05, 0.1, 0.2, 0.5)]
    assert intervals == sorted(intervals)
