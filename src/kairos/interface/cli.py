"""kairos CLI — review cards, list due cards and inspect scheduling policies."""

import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from kairos.application.config import AppConfig, resolve_config
from kairos.application.scheduler.policies import (
    confidence_label,
    schedule_for,
    score_state,
    study_recommendations,
)
from kairos.application.scheduler.records import as_aware, parse_timestamp, state_to_record
from kairos.domain.scheduling.errors import CardNotFound

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="kairos: time-aware SM-2 review scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage kairos configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _log_level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def _resolve_with_overrides(**overrides) -> AppConfig:
    return resolve_config({k: v for k, v in overrides.items() if v is not None})


def _parse_now(at: str | None) -> datetime:
    # Aware local time, matching the due dates read back from the deck
    if at is None:
        return as_aware(datetime.now())
    try:
        return parse_timestamp(at)
    except ValueError as e:
        typer.secho(f"Invalid --at timestamp {at!r}: {e}", fg="red")
        raise typer.Exit(2) from e


DeckOption = Annotated[
    Path | None, typer.Option("--deck", help="Deck JSON file. Defaults to config.")
]
AtOption = Annotated[
    str | None, typer.Option("--at", help="Review time as ISO-8601. Defaults to now.")
]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for kairos."""
    # -v adds to the configured verbosity (KAIROS_VERBOSE or config.toml)
    level = _log_level(resolve_config().verbose + verbose)
    logging.getLogger("kairos").setLevel(level)


# ---------------------------------------------------------------------------
# Review commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    card_id: Annotated[str, typer.Argument(help="Identifier of the new card.")],
    difficulty: Annotated[
        str | None,
        typer.Option(help="Show the suggested seeding plan: easy, medium or hard."),
    ] = None,
    deck: DeckOption = None,
):
    """[bold green]Add[/bold green] a new card with default scheduling state."""
    from kairos.application.factory import get_review_service

    service = get_review_service(_resolve_with_overrides(deck_path=deck))
    try:
        offsets = schedule_for(difficulty) if difficulty else None
        asyncio.run(service.add_card(card_id))
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1) from e

    typer.secho(f"Added '{card_id}'. It is due now.", fg="green")
    if offsets:
        typer.echo(f"Suggested {difficulty} plan (days): {', '.join(str(d) for d in offsets)}")


@app.command()
def review(
    card_id: Annotated[str, typer.Argument(help="Card to review.")],
    quality: Annotated[int, typer.Argument(help="Recall quality, 0 (blackout) to 5 (perfect).")],
    at: AtOption = None,
    deck: DeckOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """[bold green]Review[/bold green] a card and schedule its next review."""
    from kairos.application.factory import get_review_service

    config = _resolve_with_overrides(deck_path=deck)
    service = get_review_service(config)
    now = _parse_now(at)

    try:
        result = asyncio.run(service.review(card_id, quality, now))
    except (ValueError, CardNotFound) as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1) from e

    state = result.state
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "card": state_to_record(state),
                    "assessment": result.assessment,
                    "insights": result.insights,
                    "timing_hint": result.timing_hint,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    typer.echo(f"{confidence_label(quality)}: {result.assessment}")
    typer.echo(
        f"Next review in {state.interval_days} day(s) on "
        f"{state.next_review_at:%Y-%m-%d %H:%M}  (ease {state.easiness_factor:.2f}, "
        f"streak {state.repetitions})"
    )
    for insight in result.insights:
        typer.echo(f"  {insight}")
    typer.secho(result.timing_hint, fg="cyan")


@app.command()
def due(
    at: AtOption = None,
    limit: Annotated[int | None, typer.Option(help="Maximum cards to list.")] = None,
    deck: DeckOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List cards due for review, most overdue first."""
    from kairos.application.factory import get_review_service

    service = get_review_service(_resolve_with_overrides(deck_path=deck))
    now = _parse_now(at)
    try:
        cards = asyncio.run(service.due_cards(now, limit=limit))
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1) from e

    if json_output:
        typer.echo(json.dumps([state_to_record(c) for c in cards], indent=2))
        return

    if not cards:
        typer.secho("No cards due.", fg="green")
        return

    typer.echo(f"Due cards: {len(cards)}")
    for card in cards:
        when = f"{card.next_review_at:%Y-%m-%d %H:%M}" if card.next_review_at else "new"
        typer.echo(f"  {card.card_id}  ({when})")


# ---------------------------------------------------------------------------
# Policy commands
# ---------------------------------------------------------------------------


@app.command()
def plan(
    difficulty: Annotated[str, typer.Argument(help="Card difficulty: easy, medium or hard.")],
):
    """Show the suggested review offsets (days) for a new card."""
    try:
        offsets = schedule_for(difficulty)
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1) from e
    typer.echo(" ".join(str(d) for d in offsets))


@app.command()
def state(
    hour: Annotated[
        int | None, typer.Option(min=0, max=23, help="Hour of day. Defaults to now.")
    ] = None,
    energy: Annotated[str, typer.Option(help="low, medium or high.")] = "medium",
    focus: Annotated[str, typer.Option(help="distracted, neutral or focused.")] = "neutral",
    stress: Annotated[str, typer.Option(help="high, medium or low.")] = "medium",
):
    """Score your current learning state (0-100) and get advice."""
    if hour is None:
        hour = datetime.now().hour
    try:
        score = score_state(hour, energy, focus, stress)
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1) from e
    typer.echo(f"Learning state: {score}/100")
    for line in study_recommendations(score):
        typer.echo(f"  {line}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8787,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the scheduling HTTP API."""
    import uvicorn

    uvicorn.run("kairos.server:app", host=host, port=port, reload=reload)
