import pytest

from adaptsrs.domain import (
    AudioContent,
    CardNotFoundError,
    ClozeContent,
    CognitiveStage,
    Collection,
    Grade,
)
from adaptsrs.domain.parameters import EngineParameters


def test_new_card_is_new(make_card):
    card = make_card()
    assert card.is_new
    assert card.variant == "plain"


def test_fixed_card_is_not_new(make_card):
    card = make_card(stage=CognitiveStage.FIXATION, stability=1.0)
    assert not card.is_new


def test_acquisition_card_with_stability_is_not_new(make_card):
    # Imported progress can carry stability while still acquiring
    card = make_card(stage=CognitiveStage.ACQUISITION, stability=2.0)
    assert not card.is_new


def test_variant_follows_content(make_card):
    assert make_card(content=ClozeContent(index=2)).variant == "cloze"
    assert make_card(content=AudioContent()).variant == "audio"


def test_grade_ordering():
    assert Grade.AGAIN < Grade.HARD < Grade.GOOD < Grade.EASY
    assert Grade(3) is Grade.GOOD


def test_collection_get_card(make_card):
    card = make_card(card_id="c1")
    collection = Collection(cards=[make_card(), card])
    assert collection.get_card("c1") is card


def test_collection_get_card_missing():
    with pytest.raises(CardNotFoundError) as exc:
        Collection().get_card("nope")
    assert exc.value.card_id == "nope"
    assert "nope" in str(exc.value)


def test_collection_replace_card(make_card):
    card = make_card(card_id="c1")
    collection = Collection(cards=[card])
    updated = make_card(card_id="c1", stage=CognitiveStage.FIXATION, stability=1.0)

    collection.replace_card(updated)

    assert collection.cards == [updated]


def test_collection_replace_unknown_card(make_card):
    with pytest.raises(CardNotFoundError):
        Collection().replace_card(make_card())


def test_engine_parameter_defaults():
    params = EngineParameters()
    assert params.max_risk == 0.10
    assert params.short_term_half_life_minutes == 20.0
    assert params.fatigue_threshold == 0.7
    assert params.retention_threshold_days == 60.0
    assert params.consolidation_threshold_days == 14.0
    assert params.fixation_threshold_days == 3.0
