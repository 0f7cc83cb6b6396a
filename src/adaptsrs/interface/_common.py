"""Shared helpers for CLI command modules."""

import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from adaptsrs.application.config import AppConfig, resolve_config
from adaptsrs.application.decks import DeckTree
from adaptsrs.domain.errors import AdaptSrsError
from adaptsrs.domain.models import Deck


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Resolve config, layering the global --collection flag and command overrides."""
    obj = (ctx.obj if ctx is not None else None) or {}
    collection: Path | None = obj.get("collection")
    if collection is not None and overrides.get("collection_path") is None:
        overrides["collection_path"] = collection
    if "verbose_bonus" in obj:
        overrides.setdefault("verbose", obj["verbose_bonus"])
    return resolve_config(overrides)


def _configure_logging(verbose: int) -> None:
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.getLogger().setLevel(level)


def expand_deck_scope(decks: list[Deck], deck_ids: list[str] | None) -> list[str] | None:
    """Expand deck ids to include descendants; None means every deck."""
    if not deck_ids:
        return None
    tree = DeckTree(decks)
    scope: list[str] = []
    for deck_id in deck_ids:
        for family_id in tree.family_ids(deck_id):
            if family_id not in scope:
                scope.append(family_id)
    return scope


def fail(error: AdaptSrsError) -> NoReturn:
    """Report a domain error and exit with status 1."""
    typer.secho(f"Error: {error}", fg="red", err=True)
    raise typer.Exit(1)
