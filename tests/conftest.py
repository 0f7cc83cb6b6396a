import os
from datetime import datetime, timedelta, timezone

import pytest

from adaptsrs.domain.models import Card, CognitiveStage, Metrics, PlainContent
from adaptsrs.infrastructure.clock import FixedClock

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def make_card():
    """Factory for cards with a given memory state relative to NOW."""
    counter = iter(range(1, 10_000))

    def _make(
        stage=CognitiveStage.ACQUISITION,
        stability=0.0,
        difficulty=0.3,
        complexity=1.0,
        last_review_ago=timedelta(0),
        next_review_in=timedelta(0),
        deck_id="deck_a",
        suspended=False,
        content=None,
        card_id=None,
        front=None,
        back="back",
    ):
        n = next(counter)
        last_review = NOW - last_review_ago
        return Card(
            id=card_id or f"card_{n}",
            deck_id=deck_id,
            front=front or f"front {n}",
            back=back,
            metrics=Metrics(
                last_review=last_review,
                difficulty=difficulty,
                stability=stability,
                complexity=complexity,
            ),
            created_at=last_review,
            content=content or PlainContent(),
            stage=stage,
            suspended=suspended,
            next_review=None if next_review_in is None else NOW + next_review_in,
        )

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("ADAPTSRS_"):
            monkeypatch.delenv(key)
    return home
