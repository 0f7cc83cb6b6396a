from datetime import timedelta

import pytest

from adaptsrs.application.scheduling import RiskModel
from adaptsrs.domain.models import CognitiveStage
from adaptsrs.domain.parameters import EngineParameters


@pytest.fixture
def model():
    return RiskModel()


def test_risk_is_zero_right_after_creation(model, make_card, now):
    card = make_card()
    assert model.current_risk(card, now) == 0.0


def test_risk_grace_period_under_one_minute(model, make_card, now):
    card = make_card(last_review_ago=timedelta(seconds=50))
    assert model.current_risk(card, now) == 0.0


def test_short_term_risk_after_thirty_minutes(model, make_card, now):
    card = make_card(last_review_ago=timedelta(minutes=30))
    # 1 - 0.5^(30/20)
    assert model.current_risk(card, now) == pytest.approx(0.6464, abs=1e-4)


def test_short_term_half_life_is_configurable(make_card, now):
    model = RiskModel(EngineParameters(short_term_half_life_minutes=30.0))
    card = make_card(last_review_ago=timedelta(minutes=30))
    assert model.current_risk(card, now) == pytest.approx(0.5)


def test_long_term_risk_at_one_stability_unit(model, make_card, now):
    card = make_card(
        stage=CognitiveStage.CONSOLIDATION, stability=10.0, last_review_ago=timedelta(days=10)
    )
    assert model.current_risk(card, now) == pytest.approx(0.10)
    assert model.retrievability(card, now) == pytest.approx(0.90)


def test_complexity_shortens_effective_stability(model, make_card, now):
    card = make_card(
        stage=CognitiveStage.CONSOLIDATION,
        stability=10.0,
        complexity=2.0,
        last_review_ago=timedelta(days=5),
    )
    # 5 days over an effective stability of 5
    assert model.current_risk(card, now) == pytest.approx(0.10)


def test_zero_stability_uses_short_term_curve(model, make_card, now):
    card = make_card(stage=CognitiveStage.LAPSE, stability=0.0, last_review_ago=timedelta(minutes=20))
    assert model.current_risk(card, now) == pytest.approx(0.5)


@pytest.mark.parametrize("stage", [CognitiveStage.ACQUISITION, CognitiveStage.RETENTION])
def test_risk_is_monotonic_in_elapsed_time(model, make_card, now, stage):
    stability = 0.0 if stage == CognitiveStage.ACQUISITION else 30.0
    risks = [
        model.current_risk(
            make_card(stage=stage, stability=stability, last_review_ago=timedelta(hours=h)), now
        )
        for h in (0, 1, 6, 24, 24 * 7, 24 * 90, 24 * 3650)
    ]
    assert risks == sorted(risks)
    assert all(0.0 <= r <= 1.0 for r in risks)


def test_review_in_the_future_is_not_negative(model, make_card, now):
    card = make_card(
        stage=CognitiveStage.FIXATION, stability=2.0, last_review_ago=timedelta(days=-1)
    )
    assert model.current_risk(card, now) == 0.0
