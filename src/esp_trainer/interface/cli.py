"""esp CLI: guessing, statistics views, retention and configuration commands."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any

import typer

from esp_trainer.application import factory
from esp_trainer.application.config import AppConfig, resolve_config
from esp_trainer.application.stats.calculator import (
    format_day_name,
    format_time_slot,
    get_best_time_slot,
)
from esp_trainer.application.stats.service import TimeRange
from esp_trainer.domain.constants import DECK_TYPES, TIME_RANGE_DAYS
from esp_trainer.domain.decks.catalog import get_cards_for_deck, get_deck_chance_accuracy
from esp_trainer.domain.guesses.models import DeckType, SuitAndNumberGuess, parse_deck_type

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="esp: Practice and measure ESP card guessing.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

prefs_app = typer.Typer(help="Show or change saved preferences.", no_args_is_help=True)
app.add_typer(prefs_app, name="prefs")

config_app = typer.Typer(help="Inspect esp configuration.", no_args_is_help=True)
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


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

DeckOption = Annotated[
    str | None,
    typer.Option("--deck", "-d", help=f"Deck to use: {', '.join(DECK_TYPES)}."),
]
JsonOption = Annotated[bool, typer.Option("--json/--no-json", help="Emit JSON.")]


def _parse_deck(value: str | None) -> DeckType | None:
    if value is None:
        return None
    try:
        return parse_deck_type(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--deck") from e


def _config(ctx: typer.Context, **overrides: Any) -> AppConfig:
    return resolve_config({"verbose": ctx.obj.get("verbose", 0), **overrides})


def _dump(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for esp."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.getLogger("esp_trainer").setLevel(logging.DEBUG if verbose else logging.INFO)


# ---------------------------------------------------------------------------
# Guessing
# ---------------------------------------------------------------------------


@app.command()
def decks():
    """List the available decks and their chance accuracy."""
    for deck in DECK_TYPES:
        typer.echo(
            f"{deck:<8} {len(get_cards_for_deck(deck)):>3} cards   "
            f"chance {get_deck_chance_accuracy(deck):.2f}%"
        )


@app.command()
def guess(
    ctx: typer.Context,
    suit: Annotated[str, typer.Argument(help="Guessed suit id, e.g. 'hearts' or 'circle'.")],
    number: Annotated[
        str | None, typer.Argument(help="Guessed number; omit for Zener cards.")
    ] = None,
    deck: DeckOption = None,
):
    """[bold green]Guess[/bold green] a card, then reveal a securely drawn one."""
    deck_type = _parse_deck(deck)
    config = _config(ctx)
    store = factory.get_preferences_store(config)
    prefs = store.load()
    if not prefs.has_seen_help:
        typer.echo("Tip: run `esp decks` for deck names and `esp stats` to see your results.")
        store.save(prefs.model_copy(update={"has_seen_help": True}))
    if prefs.show_concentration_prompt:
        typer.secho("Clear your mind and concentrate on the card...", fg="cyan")

    service = factory.get_guess_service(config)
    try:
        outcome = asyncio.run(service.draw_and_record(suit, number, deck_type))
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(2)

    record = outcome.record
    typer.echo(f"Drawn card: {outcome.card.name}")
    if record.exact_match:
        typer.secho("Exact match!", fg="green")
    elif record.suit_match:
        typer.secho("Suit matched.", fg="yellow")
    elif isinstance(record, SuitAndNumberGuess) and record.number_match:
        typer.secho("Number matched.", fg="yellow")
    else:
        typer.echo("No match.")
    typer.echo(f"Current streak: {outcome.current_streak}")


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@app.command()
def stats(ctx: typer.Context, deck: DeckOption = None, as_json: JsonOption = False):
    """Summary accuracy and streaks, for one deck or all of them."""
    deck_type = _parse_deck(deck)
    service = factory.get_stats_service(_config(ctx))

    if deck_type:
        snapshot = asyncio.run(service.load_stats(deck_type))
        rows = [snapshot.deck_stats] if snapshot.deck_stats else []
    else:
        rows = asyncio.run(service.get_deck_overview())

    if as_json:
        _dump([asdict(r) for r in rows])
        return

    typer.echo("Deck Stats")
    typer.echo(
        f"{'deck':<8} {'guesses':>7} {'exact':>8} {'suit':>8} {'number':>8} "
        f"{'best':>5} {'now':>4}"
    )
    for r in rows:
        typer.echo(
            f"{r.deck_type:<8} {r.total_guesses:>7} {r.accuracy:>7.2f}% "
            f"{r.suit_accuracy:>7.2f}% {r.number_accuracy:>7.2f}% "
            f"{r.best_streak:>5} {r.current_streak:>4}"
        )


@app.command()
def heatmap(
    ctx: typer.Context,
    deck: DeckOption = None,
    min_points: Annotated[
        int | None, typer.Option("--min-points", min=1, help="Minimum guesses per slot.")
    ] = None,
    as_json: JsonOption = False,
):
    """Accuracy by day of week and hour of day."""
    deck_type = _parse_deck(deck)
    config = _config(ctx, heatmap_min_points=min_points)
    snapshot = asyncio.run(factory.get_stats_service(config).load_stats(deck_type))
    cells = sorted(snapshot.heatmap, key=lambda c: (c.day, c.hour))
    best = get_best_time_slot(cells)

    if as_json:
        _dump({"cells": [asdict(c) for c in cells], "best": asdict(best) if best else None})
        return

    if not cells:
        typer.secho(
            f"Not enough data yet (need {config.heatmap_min_points} guesses per time slot).",
            fg="yellow",
        )
        return

    for c in cells:
        typer.echo(
            f"{format_day_name(c.day):<10} {format_time_slot(c.hour):>8}  "
            f"{c.accuracy:>6.2f}%  (n={c.count})"
        )
    if best:
        typer.secho(
            f"Best time: {format_day_name(best.day)} at {format_time_slot(best.hour)} "
            f"({best.accuracy:.2f}%)",
            fg="green",
        )


def _print_ranking(rows: list[Any], label: str, limit: int | None, as_json: bool) -> None:
    rows = rows[:limit] if limit else rows
    if as_json:
        _dump([asdict(r) for r in rows])
        return
    if not rows:
        typer.secho("No guesses recorded yet.", fg="yellow")
        return
    for r in rows:
        typer.echo(
            f"{getattr(r, label):<24} {r.successes:>4}/{r.attempts:<4} {r.accuracy:>7.2f}%"
        )


LimitOption = Annotated[int | None, typer.Option("--limit", "-n", min=1, help="Show top N.")]


@app.command()
def cards(
    ctx: typer.Context,
    deck: DeckOption = None,
    limit: LimitOption = None,
    as_json: JsonOption = False,
):
    """Exact-match accuracy per drawn card, best first."""
    service = factory.get_stats_service(_config(ctx))
    snapshot = asyncio.run(service.load_stats(_parse_deck(deck)))
    _print_ranking(snapshot.card_accuracy, "card_name", limit, as_json)


@app.command()
def suits(
    ctx: typer.Context,
    deck: DeckOption = None,
    limit: LimitOption = None,
    as_json: JsonOption = False,
):
    """Suit-match accuracy per drawn suit, best first."""
    service = factory.get_stats_service(_config(ctx))
    snapshot = asyncio.run(service.load_stats(_parse_deck(deck)))
    _print_ranking(snapshot.suit_accuracy, "suit", limit, as_json)


@app.command()
def numbers(
    ctx: typer.Context,
    deck: DeckOption = None,
    limit: LimitOption = None,
    as_json: JsonOption = False,
):
    """Number-match accuracy per drawn number, best first."""
    service = factory.get_stats_service(_config(ctx))
    snapshot = asyncio.run(service.load_stats(_parse_deck(deck)))
    _print_ranking(snapshot.number_accuracy, "number", limit, as_json)


@app.command()
def progress(
    ctx: typer.Context,
    deck: DeckOption = None,
    time_range: Annotated[
        str, typer.Option("--range", "-r", help=f"Time range: {', '.join(TIME_RANGE_DAYS)}.")
    ] = "all",
    window: Annotated[
        int | None, typer.Option("--window", "-w", min=1, help="Guesses per rolling window.")
    ] = None,
    as_json: JsonOption = False,
):
    """Rolling-window accuracy over time."""
    deck_type = _parse_deck(deck)
    if time_range not in TIME_RANGE_DAYS:
        raise typer.BadParameter(
            f"Expected one of: {', '.join(TIME_RANGE_DAYS)}", param_hint="--range"
        )

    service = factory.get_stats_service(_config(ctx, window_size=window))
    rng: TimeRange = time_range  # type: ignore[assignment]
    points = asyncio.run(service.get_progress_data(deck_type, rng))

    if as_json:
        _dump([asdict(p) for p in points])
        return

    if not points:
        typer.secho("No guesses in this range.", fg="yellow")
        return
    for p in points:
        typer.echo(f"{p.date.isoformat()}  {p.accuracy:>6.2f}%  after {p.guess_count} guesses")


@app.command()
def history(
    ctx: typer.Context,
    deck: DeckOption = None,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Guesses to show.")] = 10,
    as_json: JsonOption = False,
):
    """The most recent guesses, newest first."""
    service = factory.get_stats_service(_config(ctx))
    page = asyncio.run(service.get_history(limit, _parse_deck(deck)))

    if as_json:
        _dump(
            {
                "records": [asdict(r) for r in page.records],
                "total_guesses": page.total_guesses,
                "exact_matches": page.exact_matches,
            }
        )
        return

    for r in page.records:
        guessed = " ".join(filter(None, [r.guessed_number, r.guessed_suit]))
        actual = " ".join(filter(None, [r.actual_number, r.actual_suit]))
        mark = "exact" if r.exact_match else "suit" if r.suit_match else "-"
        typer.echo(f"{r.timestamp:>14}  {r.deck_type:<8} {guessed:<22} {actual:<22} {mark}")
    typer.echo(
        f"Showing {len(page.records)} of {page.total_guesses} guesses "
        f"({page.exact_matches} exact)."
    )


# ---------------------------------------------------------------------------
# Retention
# ---------------------------------------------------------------------------


@app.command()
def prune(
    ctx: typer.Context,
    days: Annotated[
        int | None,
        typer.Option("--days", min=1, help="Delete guesses older than N days. Defaults to config."),
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """Delete guesses older than the retention window."""
    config = _config(ctx)
    retention = days or config.retention_days
    if retention is None:
        typer.secho("No retention configured. Pass --days or set ESP_RETENTION_DAYS.", fg="red")
        raise typer.Exit(2)

    if not force:
        typer.confirm(f"Delete all guesses older than {retention} days?", abort=True)

    deleted = asyncio.run(factory.get_stats_service(config).prune_older_than(retention))
    typer.secho(f"Deleted {deleted} guesses.", fg="green")


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """Delete every stored guess."""
    if not force:
        typer.confirm("Delete ALL stored guesses? This cannot be undone.", abort=True)

    cleared = asyncio.run(factory.get_stats_service(_config(ctx)).clear_history())
    typer.secho(f"Deleted {cleared} guesses.", fg="green")


# ---------------------------------------------------------------------------
# Preferences subgroup
# ---------------------------------------------------------------------------


@prefs_app.command("show")
def prefs_show(ctx: typer.Context):
    """Display saved preferences."""
    store = factory.get_preferences_store(_config(ctx))
    typer.echo(store.load().model_dump_json(indent=2))


@prefs_app.command("set-deck")
def prefs_set_deck(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help=f"One of: {', '.join(DECK_TYPES)}.")],
):
    """Change the default deck for guesses."""
    try:
        deck_type = parse_deck_type(deck)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="DECK") from e

    factory.get_guess_service(_config(ctx)).select_deck(deck_type)
    typer.secho(f"Default deck set to {deck_type}.", fg="green")


@prefs_app.command("set")
def prefs_set(
    ctx: typer.Context,
    concentration_prompt: Annotated[
        bool | None,
        typer.Option(
            "--concentration-prompt/--no-concentration-prompt",
            help="Show a prompt to concentrate before each draw.",
        ),
    ] = None,
    seen_help: Annotated[
        bool | None,
        typer.Option("--seen-help/--no-seen-help", help="Hide or show the first-run tip."),
    ] = None,
):
    """Change display preferences."""
    updates = {
        k: v
        for k, v in {
            "show_concentration_prompt": concentration_prompt,
            "has_seen_help": seen_help,
        }.items()
        if v is not None
    }
    if not updates:
        typer.secho("Nothing to change. See `esp prefs set --help`.", fg="yellow")
        raise typer.Exit(2)

    store = factory.get_preferences_store(_config(ctx))
    store.save(store.load().model_copy(update=updates))
    typer.secho("Preferences updated.", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
