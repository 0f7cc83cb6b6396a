"""Tests for CLI commands: help, session, review, health, import/export, serve and config."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from adaptsrs.application.decks import DeckTree
from adaptsrs.domain.models import CognitiveStage
from adaptsrs.infrastructure.repository.collection_store import CollectionStore
from adaptsrs.interface.cli import app

runner = CliRunner()

ANKI_EXPORT = """#separator:semicolon
#html:true
#deck column:1
#tags column:4
"Lang::French";"chien";"dog";"animals"
"Lang::French";"chat";"cat";""
"Math";"2+2";"4";""
"""


@pytest.fixture
def collection_path(tmp_path, mock_home):
    return tmp_path / "collection.yaml"


@pytest.fixture
def imported(collection_path, tmp_path):
    """A collection populated through the import command."""
    source = tmp_path / "export.txt"
    source.write_text(ANKI_EXPORT, encoding="utf-8")
    result = runner.invoke(app, ["--collection", str(collection_path), "import", str(source)])
    assert result.exit_code == 0, result.output
    return CollectionStore(collection_path)


def invoke(collection_path, *args):
    return runner.invoke(app, ["--collection", str(collection_path), *args])


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "adaptive spaced-repetition scheduler" in result.stdout
    for command in ("session", "review", "health", "import", "export", "serve", "config"):
        assert command in result.stdout


# --- Import ---


def test_import_command(imported):
    collection = imported.load()
    assert len(collection.cards) == 3
    assert {c.front for c in collection.cards} == {"chien", "chat", "2+2"}


def test_import_message(collection_path, tmp_path):
    source = tmp_path / "export.txt"
    source.write_text(ANKI_EXPORT, encoding="utf-8")
    result = invoke(collection_path, "import", str(source))
    assert "3 cards imported successfully" in result.output


def test_import_without_rows(collection_path, tmp_path):
    source = tmp_path / "empty.txt"
    source.write_text("#separator:semicolon\n", encoding="utf-8")

    result = invoke(collection_path, "import", str(source))

    assert result.exit_code == 1
    assert "No valid rows" in result.output
    assert not collection_path.exists()


# --- Session ---


def test_session_json(collection_path, imported):
    result = invoke(collection_path, "session", "--json")
    assert result.exit_code == 0

    queue = json.loads(result.stdout)
    assert len(queue) == 3
    assert all(item["priority"] == 2.0 for item in queue)
    assert all(item["cue"] == "new" for item in queue)
    assert all(item["message"] == "New concept." for item in queue)
    assert [item["front"] for item in queue] == ["chien", "chat", "2+2"]


def test_session_limit_and_deck(collection_path, imported):
    lang = DeckTree(imported.load().decks).ensure_path("Lang")

    result = invoke(collection_path, "session", "--deck", lang, "--limit", "1", "--json")

    assert result.exit_code == 0
    queue = json.loads(result.stdout)
    assert [item["front"] for item in queue] == ["chien"]


def test_session_text_output(collection_path, imported):
    result = invoke(collection_path, "session", "--strategy", "focus")
    assert result.exit_code == 0
    assert "chien" in result.stdout
    assert "New concept." in result.stdout


def test_session_empty(collection_path):
    result = invoke(collection_path, "session")
    assert result.exit_code == 0
    assert "Nothing to study right now." in result.stdout


def test_session_unknown_deck(collection_path, imported):
    result = invoke(collection_path, "session", "--deck", "deck_missing")
    assert result.exit_code == 1
    assert "Deck not found: deck_missing" in result.output


# --- Review ---


def test_review_command(collection_path, imported):
    card = imported.load().cards[0]

    result = invoke(collection_path, "review", card.id, "3", "--time", "4")

    assert result.exit_code == 0
    assert "Scheduled for 1 day" in result.stdout
    updated = imported.load().get_card(card.id)
    assert updated.stage == CognitiveStage.FIXATION
    assert updated.repetitions == 1
    assert len(updated.metrics.history) == 1


def test_review_again_on_new_card(collection_path, imported):
    card = imported.load().cards[0]
    result = invoke(collection_path, "review", card.id, "1")
    assert result.exit_code == 0
    assert "Missed it?" in result.stdout


def test_review_unknown_card(collection_path, imported):
    result = invoke(collection_path, "review", "card_missing", "3")
    assert result.exit_code == 1
    assert "Card not found: card_missing" in result.output


def test_review_grade_out_of_range(collection_path, imported):
    card = imported.load().cards[0]
    result = invoke(collection_path, "review", card.id, "5")
    assert result.exit_code != 0


# --- Health ---


def test_health_json(collection_path, imported):
    lang = DeckTree(imported.load().decks).ensure_path("Lang")

    result = invoke(collection_path, "health", lang, "--json")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    # New cards are due from creation, so a fresh import counts as overdue
    assert data["health_score"] == 0
    assert data["status_message"] == "Many overdue"
    # Cards live in the French sub-deck
    assert data["distribution"]["new"] == 2


def test_health_text(collection_path, imported):
    math = DeckTree(imported.load().decks).ensure_path("Math")
    result = invoke(collection_path, "health", math)
    assert result.exit_code == 0
    assert "Health: 0/100  Many overdue" in result.stdout


def test_health_unknown_deck(collection_path, imported):
    result = invoke(collection_path, "health", "deck_missing")
    assert result.exit_code == 1


# --- Export ---


def test_export_command(collection_path, imported, tmp_path):
    target = tmp_path / "out.txt"

    result = invoke(collection_path, "export", str(target))

    assert result.exit_code == 0
    lines = target.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "#separator:semicolon"
    assert '"Lang::French";"chien";"dog";"animals"' in lines
    assert len(lines) == 7


def test_export_deck(collection_path, imported, tmp_path):
    target = tmp_path / "out.txt"
    math = DeckTree(imported.load().decks).ensure_path("Math")

    result = invoke(collection_path, "export", str(target), "--deck", math)

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8").split("\n")[4:] == ['"Math";"2+2";"4";""']


def test_export_unknown_deck(collection_path, imported, tmp_path):
    result = invoke(collection_path, "export", str(tmp_path / "out.txt"), "--deck", "nope")
    assert result.exit_code == 1


# --- Server ---


@patch("uvicorn.run")
def test_serve_command(mock_run):
    result = runner.invoke(app, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    mock_run.assert_called_with("adaptsrs.server:app", host="127.0.0.1", port=9000, reload=False)


# --- Config ---


def test_config_show_command(mock_home, monkeypatch):
    monkeypatch.setenv("ADAPTSRS_MAX_RISK", "0.2")
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["max_risk"] == 0.2
    assert data["collection_path"].endswith("collection.yaml")
