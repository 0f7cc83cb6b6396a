import pytest

from adaptsrs.application.decks import DeckTree, split_deck_path
from adaptsrs.domain.errors import DeckNotFoundError
from adaptsrs.domain.models import Deck


@pytest.fixture
def tree():
    return DeckTree(
        [
            Deck(id="lang", title="Languages"),
            Deck(id="fr", title="French", parent_id="lang"),
            Deck(id="verbs", title="Verbs", parent_id="fr"),
            Deck(id="de", title="German", parent_id="lang"),
            Deck(id="math", title="Math"),
        ]
    )


def test_split_deck_path():
    assert split_deck_path("Languages::French") == ["Languages", "French"]
    assert split_deck_path(" A :: B ::") == ["A", "B"]
    assert split_deck_path("") == []


def test_get_unknown_deck(tree):
    with pytest.raises(DeckNotFoundError):
        tree.get("nope")


def test_family_ids(tree):
    assert tree.family_ids("lang") == ["lang", "fr", "verbs", "de"]
    assert tree.family_ids("math") == ["math"]


def test_family_ids_unknown(tree):
    with pytest.raises(DeckNotFoundError):
        tree.family_ids("nope")


def test_full_path(tree):
    assert tree.full_path("verbs") == "Languages::French::Verbs"
    assert tree.full_path("math") == "Math"


def test_full_path_unknown_deck(tree, caplog):
    assert tree.full_path("ghost") == "Imported"
    assert "ghost" in caplog.text


def test_ensure_path_reuses_existing(tree):
    before = len(tree.decks)
    assert tree.ensure_path("Languages::French") == "fr"
    assert len(tree.decks) == before


def test_ensure_path_creates_missing(tree, now):
    deck_id = tree.ensure_path("Languages::Spanish::Food", now=now)

    assert len(tree.decks) == 7
    created = tree.get(deck_id)
    assert created.title == "Food"
    assert created.created_at == now
    assert tree.full_path(deck_id) == "Languages::Spanish::Food"
    assert tree.get(created.parent_id).parent_id == "lang"


def test_same_title_under_different_parents(tree):
    a = tree.ensure_path("A::Shared")
    b = tree.ensure_path("B::Shared")
    assert a != b


def test_empty_path_goes_to_import_deck():
    tree = DeckTree([])
    deck_id = tree.ensure_path("")
    assert tree.get(deck_id).title == "Imported"
    assert tree.ensure_path("::") == deck_id
