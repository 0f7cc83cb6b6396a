"""adaptsrs CLI: study sessions, reviews, deck health, Anki import/export."""

import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from adaptsrs.application.config import resolve_config
from adaptsrs.domain.errors import AdaptSrsError
from adaptsrs.interface._common import (
    _configure_logging,
    _resolve_with_overrides,
    expand_deck_scope,
    fail,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="adaptsrs: adaptive spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    due = "due"
    focus = "focus"


config_app = typer.Typer(help="Manage adaptsrs configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
    collection: Annotated[
        Path | None, typer.Option(help="Collection file. Defaults to 'collection_path' in config.")
    ] = None,
):
    """Global settings for adaptsrs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose
    ctx.obj["collection"] = collection
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# Study commands
# ---------------------------------------------------------------------------


@app.command()
def session(
    ctx: typer.Context,
    deck: Annotated[
        list[str] | None,
        typer.Option("--deck", "-d", help="Deck id to study (with its sub-decks). Repeatable."),
    ] = None,
    limit: Annotated[int | None, typer.Option(help="Maximum cards in the queue.")] = None,
    strategy: Annotated[
        Strategy,
        typer.Option(
            help=(
                "Selection strategy. "
                "'due' = new and due cards, overdue boosted. "
                "'focus' = new cards and any card above the safe risk."
            ),
        ),
    ] = Strategy.due,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the [bold green]study queue[/bold green], highest priority first."""
    from adaptsrs.application.factory import get_session_builder, get_store

    config = _resolve_with_overrides(ctx, session_limit=limit)
    collection = get_store(config).load()

    try:
        scope = expand_deck_scope(collection.decks, deck)
    except AdaptSrsError as e:
        fail(e)

    builder = get_session_builder(config, strategy=strategy.value)
    queue = builder.build(collection.cards, deck_ids=scope, limit=config.session_limit)

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": p.card.id,
                        "deck_id": p.card.deck_id,
                        "front": p.card.front,
                        "stage": p.card.stage.value,
                        "priority": round(p.priority_score, 4),
                        "cue": p.explanation.visual_cue.value,
                        "message": p.explanation.message,
                    }
                    for p in queue
                ],
                indent=2,
            )
        )
        return

    if not queue:
        typer.secho("Nothing to study right now.", fg="green")
        return

    colors = {"critical": "red", "warning": "yellow", "safe": "green", "new": "blue"}
    for i, p in enumerate(queue, start=1):
        cue = p.explanation.visual_cue.value
        typer.secho(f"{i:>3}. [{cue}] ", fg=colors[cue], nl=False)
        typer.echo(f"{p.card.front[:60]}  ({p.priority_score:.2f}, {p.explanation.message})")


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Id of the card answered.")],
    grade: Annotated[
        int, typer.Argument(min=1, max=4, help="1=again, 2=hard, 3=good, 4=easy.")
    ],
    time_to_recall: Annotated[
        float, typer.Option("--time", "-t", min=0.0, help="Seconds taken to answer.")
    ] = 10.0,
):
    """Register one answer and reschedule the card."""
    from adaptsrs.application.factory import get_review_processor, get_store
    from adaptsrs.application.review_processor import StudySession

    config = _resolve_with_overrides(ctx)
    store = get_store(config)
    collection = store.load()

    try:
        card = collection.get_card(card_id)
    except AdaptSrsError as e:
        fail(e)

    result = get_review_processor(config).register_answer(
        card, grade, time_to_recall, StudySession()
    )
    collection.replace_card(result.card)
    store.save(collection)

    typer.echo(result.feedback)


@app.command()
def health(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck to analyze (with its sub-decks).")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Report deck health: 0-100 score and stage distribution."""
    from adaptsrs.application.decks import DeckTree
    from adaptsrs.application.factory import get_health_analyzer, get_store

    config = _resolve_with_overrides(ctx)
    collection = get_store(config).load()

    try:
        family = DeckTree(collection.decks).family_ids(deck_id)
    except AdaptSrsError as e:
        fail(e)

    result = get_health_analyzer(config).analyze(collection.cards, deck_id, family)

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    color = "green" if result.health_score >= 80 else "yellow" if result.health_score >= 50 else "red"
    typer.secho(f"Health: {result.health_score}/100  {result.status_message}", fg=color)
    d = result.distribution
    typer.echo(f"New: {d.new}  Learning: {d.learning}  Review: {d.review}  Suspended: {d.suspended}")


# ---------------------------------------------------------------------------
# Anki interop
# ---------------------------------------------------------------------------


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Anki text export (.txt).", exists=True)],
):
    """Import an Anki delimited-text export into the collection."""
    from adaptsrs.application.factory import get_store
    from adaptsrs.application.portability import import_text
    from adaptsrs.infrastructure.clock import SystemClock

    config = _resolve_with_overrides(ctx)
    store = get_store(config)
    collection = store.load()

    logger.info(f"Importing {path}")
    content = path.read_text(encoding="utf-8")
    try:
        result = import_text(collection, content, SystemClock().now())
    except AdaptSrsError as e:
        fail(e)

    store.save(collection)
    typer.secho(result.message, fg="green")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Destination .txt file.")],
    deck: Annotated[
        str | None, typer.Option("--deck", "-d", help="Export only this deck and its sub-decks.")
    ] = None,
):
    """Export the collection as an Anki-compatible text file."""
    from adaptsrs.application.factory import get_store
    from adaptsrs.application.portability import export_text

    config = _resolve_with_overrides(ctx)
    collection = get_store(config).load()

    try:
        content = export_text(collection, deck)
    except AdaptSrsError as e:
        fail(e)

    path.write_text(content, encoding="utf-8")
    logger.debug(f"Wrote {len(content)} characters to {path}")
    typer.secho(f"Exported to {path}", fg="green")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8787,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("adaptsrs.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
