"""
Engine Factory
Centralizes building engine components and the collection store from config.
"""

from adaptsrs.application.config import AppConfig
from adaptsrs.application.deck_health import DeckHealthAnalyzer
from adaptsrs.application.review_processor import ReviewProcessor
from adaptsrs.application.session_builder import SessionBuilder, strategy_for
from adaptsrs.domain.ports import Clock, CollectionRepository
from adaptsrs.infrastructure.repository.collection_store import CollectionStore


def get_store(config: AppConfig) -> CollectionRepository:
    return CollectionStore(config.collection_path)


def get_review_processor(config: AppConfig, clock: Clock | None = None) -> ReviewProcessor:
    return ReviewProcessor(config.engine_parameters(), clock=clock)


def get_session_builder(
    config: AppConfig,
    strategy: str = "due",
    clock: Clock | None = None,
) -> SessionBuilder:
    """
    Returns a SessionBuilder using the named selection strategy ("due" or "focus").
    """
    params = config.engine_parameters()
    return SessionBuilder(params, clock=clock, strategy=strategy_for(strategy, params))


def get_health_analyzer(config: AppConfig, clock: Clock | None = None) -> DeckHealthAnalyzer:
    return DeckHealthAnalyzer(config.engine_parameters(), clock=clock)
