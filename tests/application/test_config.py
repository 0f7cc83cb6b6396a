from pathlib import Path

import pytest
from pydantic import ValidationError

from adaptsrs.application import factory
from adaptsrs.application.config import AppConfig, resolve_config
from adaptsrs.application.session_builder import FocusStrategy
from adaptsrs.infrastructure.repository.collection_store import CollectionStore


def test_defaults(mock_home):
    config = resolve_config()
    assert config.collection_path == mock_home / ".local/share/adaptsrs/collection.yaml"
    assert config.max_risk == 0.10
    assert config.session_limit == 50


def test_env_overrides(mock_home, monkeypatch):
    monkeypatch.setenv("ADAPTSRS_MAX_RISK", "0.2")
    monkeypatch.setenv("ADAPTSRS_FATIGUE_THRESHOLD", "0.5")

    params = resolve_config().engine_parameters()
    assert params.max_risk == 0.2
    assert params.fatigue_threshold == 0.5


def test_toml_file(mock_home, monkeypatch):
    config_dir = mock_home / ".config/adaptsrs"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text("session_limit = 20\nmax_risk = 0.15\n")
    monkeypatch.setenv("ADAPTSRS_MAX_RISK", "0.25")

    config = resolve_config()
    assert config.session_limit == 20
    # Environment beats the file
    assert config.max_risk == 0.25


def test_overrides_win_and_none_is_ignored(mock_home, tmp_path):
    config = resolve_config({"collection_path": tmp_path / "c.yaml", "session_limit": None})
    assert config.collection_path == tmp_path / "c.yaml"
    assert config.session_limit == 50


@pytest.mark.parametrize("field, value", [("max_risk", 1.5), ("max_risk", 0.0), ("session_limit", 0)])
def test_invalid_values(mock_home, field, value):
    with pytest.raises(ValidationError):
        AppConfig(**{field: value})


def test_factory_wiring(mock_home, clock):
    config = resolve_config({"max_risk": 0.3})

    store = factory.get_store(config)
    assert isinstance(store, CollectionStore)
    assert Path(store.path) == config.collection_path

    processor = factory.get_review_processor(config, clock=clock)
    assert processor.params.max_risk == 0.3
    assert processor.clock is clock

    builder = factory.get_session_builder(config, strategy="focus", clock=clock)
    assert isinstance(builder.strategy, FocusStrategy)
    assert builder.strategy.max_risk == 0.3

    analyzer = factory.get_health_analyzer(config, clock=clock)
    assert analyzer.params.critical_risk == 0.30
