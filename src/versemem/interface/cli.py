"""versemem CLI: memory list management and interactive practice."""

import asyncio
import json
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Annotated

import typer

from versemem.application.classifier import classify
from versemem.application.config import AppConfig, config_file_candidates, resolve_config
from versemem.application.importer import load_verse_file
from versemem.application.scheduler import format_interval, parse_rating, preview
from versemem.application.service import MemoryService
from versemem.domain.errors import InvalidItem, InvalidRating, VerseMemError
from versemem.domain.models import MemoryItem
from versemem.infrastructure.adapters.factory import get_memory_service
from versemem.infrastructure.adapters.memory_store import InMemoryRepository

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="versemem: spaced-repetition practice for Scripture memory verses.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Inspect versemem configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# Verses used by `practice --demo`, at various points in their schedule.
DEMO_VERSES = [
    (
        "John 3:16",
        "For God so loved the world that he gave his one and only Son, that whoever "
        "believes in him shall not perish but have eternal life.",
        "NIV",
        2.5,
        1,
        3,
    ),
    (
        "Philippians 4:13",
        "I can do all things through Christ who strengthens me.",
        "NKJV",
        2.3,
        3,
        5,
    ),
    (
        "Romans 8:28",
        "And we know that in all things God works for the good of those who love him, "
        "who have been called according to his purpose.",
        "NIV",
        2.1,
        1,
        2,
    ),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context, **overrides) -> AppConfig:
    obj = ctx.obj or {}
    overrides.setdefault("user_id", obj.get("user_id"))
    try:
        return resolve_config(overrides)
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(2) from e


def _service(ctx: typer.Context) -> MemoryService:
    return get_memory_service(_config(ctx))


def _run(coro):
    """Run a service coroutine, turning domain errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except VerseMemError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


def _describe_due(item: MemoryItem, today: date) -> str:
    days = (item.next_review_at - today).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    return f"In {days} days"


def _item_dict(item: MemoryItem) -> dict:
    return {
        "id": item.id,
        "reference": item.reference,
        "text": item.content,
        "translation": item.translation,
        "status": classify(item).value,
        "ease_factor": item.ease_factor,
        "interval": item.interval,
        "repetitions": item.repetitions,
        "next_review": item.next_review_at.isoformat(),
        "last_reviewed": item.last_reviewed_at.isoformat() if item.last_reviewed_at else None,
    }


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
    ] = 0,
    user: Annotated[
        str | None, typer.Option("--user", "-u", help="User whose list to use.")
    ] = None,
):
    """Global settings for versemem."""
    ctx.ensure_object(dict)
    ctx.obj["user_id"] = user
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG if verbose > 1 else logging.INFO)


# ---------------------------------------------------------------------------
# Memory list
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    reference: Annotated[str, typer.Argument(help="Scripture reference, e.g. 'John 3:16'.")],
    text: Annotated[str, typer.Argument(help="Verse text to memorize.")],
    translation: Annotated[
        str | None, typer.Option("--translation", "-t", help="Translation, e.g. NIV.")
    ] = None,
):
    """[bold green]Add[/bold green] a verse to your memory list."""
    service = _service(ctx)
    item = _run(service.add_item(reference, text, translation))
    typer.secho(f"Added {item.reference} ({item.translation}) [{item.id}]", fg="green")


@app.command("import")
def import_verses(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="YAML file with a list of verses.")],
):
    """Bulk-add verses from a YAML file."""
    try:
        entries = load_verse_file(path)
    except (OSError, InvalidItem) as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e

    service = _service(ctx)
    report = _run(service.import_items(entries))
    typer.secho(f"Imported {len(report.added)} verses.", fg="green")
    for reference in report.skipped:
        typer.secho(f"Skipped (already on list): {reference}", fg="yellow")


@app.command("list")
def list_items(
    ctx: typer.Context,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON.")] = False,
):
    """List every verse with its status and next review."""
    service = _service(ctx)
    dashboard = _run(service.dashboard())

    if as_json:
        payload = {
            "verses": [_item_dict(i) for i in dashboard.items],
            "dueCount": dashboard.due_count,
            "stats": {
                "total": dashboard.stats.total,
                "mastered": dashboard.stats.mastered,
                "learning": dashboard.stats.learning,
                "new": dashboard.stats.new,
            },
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not dashboard.items:
        typer.secho("Your memory list is empty. Add a verse with 'versemem add'.", fg="yellow")
        return

    today = service.now().date()
    for item in dashboard.items:
        data = _item_dict(item)
        typer.echo(
            f"{item.reference:<24} {item.translation:<6} {data['status']:<9} "
            f"{_describe_due(item, today):<12} {item.id}"
        )


@app.command()
def due(ctx: typer.Context):
    """Show verses due for review today."""
    service = _service(ctx)
    items = _run(service.due_items())
    if not items:
        typer.secho("Nothing due. Well done!", fg="green")
        return
    typer.echo(f"{len(items)} due:")
    for item in items:
        typer.echo(f"  {item.reference} [{item.id}]")


@app.command()
def stats(ctx: typer.Context):
    """Show dashboard counts."""
    service = _service(ctx)
    dashboard = _run(service.dashboard())
    s = dashboard.stats
    typer.echo(f"Total:      {s.total}")
    typer.echo(f"Mastered:   {s.mastered}")
    typer.echo(f"Learning:   {s.learning}")
    typer.echo(f"New:        {s.new}")
    typer.echo(f"Due today:  {s.due_today}")


@app.command()
def review(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Verse ID.")],
    rating: Annotated[str, typer.Argument(help="0-5, or again/hard/good/easy.")],
):
    """Record a single review outside a practice session."""
    try:
        quality = parse_rating(rating)
    except InvalidRating as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(2) from e

    service = _service(ctx)
    item = _run(service.review_item(item_id, quality))
    typer.echo(
        f"{item.reference}: next review {item.next_review_at.isoformat()} "
        f"(in {format_interval(item.interval)})"
    )


@app.command("preview")
def preview_item(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Verse ID.")],
):
    """Show the next interval each rating would give."""
    service = _service(ctx)
    previews = _run(service.preview_item(item_id))
    for p in previews:
        typer.echo(f"{p.rating:<6} ({p.quality}) -> {p.label}")


@app.command()
def remove(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Verse ID.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Remove a verse from your memory list."""
    if not force:
        typer.confirm(f"Remove {item_id}?", abort=True)
    service = _service(ctx)
    _run(service.remove_item(item_id))
    typer.secho(f"Removed {item_id}.", fg="green")


# ---------------------------------------------------------------------------
# Practice
# ---------------------------------------------------------------------------


def _demo_service(config: AppConfig) -> MemoryService:
    service = get_memory_service(config, repo=InMemoryRepository())
    now = service.now()

    async def seed():
        for reference, text, translation, ease, interval, reps in DEMO_VERSES:
            item = await service.add_item(reference, text, translation)
            await service.save_item(
                item.with_schedule(
                    ease_factor=ease,
                    interval=interval,
                    repetitions=reps,
                    next_review_at=now.date(),
                    last_reviewed_at=now - timedelta(days=interval),
                )
            )

    asyncio.run(seed())
    return service


def _prompt_rating(item: MemoryItem, now: datetime) -> int:
    hints = "  ".join(f"{p.rating} ({p.label})" for p in preview(item, now))
    typer.echo(hints)
    while True:
        answer = typer.prompt("How well did you remember it? [again/hard/good/easy or 0-5]")
        try:
            return parse_rating(answer)
        except InvalidRating as e:
            typer.secho(str(e), fg="red")


@app.command()
def practice(
    ctx: typer.Context,
    order: Annotated[
        str | None,
        typer.Option("--order", help="Presentation order: due, hardest or shuffle."),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=0, help="Maximum verses this session (0 = no cap)."),
    ] = None,
    seed: Annotated[int | None, typer.Option(help="Random seed for --order shuffle.")] = None,
    demo: Annotated[
        bool, typer.Option("--demo", help="Practice sample verses without touching your list.")
    ] = False,
):
    """[bold green]Practice[/bold green] the verses due today."""
    config = _config(ctx)
    order = order or config.session_order
    if order not in ("due", "hardest", "shuffle"):
        typer.secho(f"Unknown order: {order}", fg="red", err=True)
        raise typer.Exit(2)
    service = _demo_service(config) if demo else get_memory_service(config)

    async def run():
        session = await service.start_practice(
            order=order,
            max_items=config.max_session_size if limit is None else limit,
            seed=seed,
        )
        if session.complete:
            typer.secho("No verses due. Come back tomorrow!", fg="green")
            return session

        while (item := session.current_item()) is not None:
            typer.echo("")
            typer.secho(
                f"[{session.position + 1}/{len(session)}] {item.reference} ({item.translation})",
                bold=True,
            )
            typer.prompt(
                "Recall the verse, then press Enter to reveal", default="", show_default=False
            )
            typer.echo(f'"{item.content}"')
            quality = _prompt_rating(item, service.now())
            update = await service.submit(session, quality)
            typer.echo(f"Next review in {format_interval(update.item.interval)}.")
        return session

    session = _run(run())
    if len(session) == 0:
        return

    summary = session.summary()
    typer.echo("")
    typer.secho("Session complete!", fg="green", bold=True)
    typer.echo(f"Reviewed:   {summary.total_presented}")
    typer.echo(f"Correct:    {summary.correct_count}")
    typer.echo(f"Incorrect:  {summary.incorrect_count}")
    typer.echo(f"Accuracy:   {summary.accuracy}%")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option(help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Auto-reload on code changes.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    config = _config(ctx)
    uvicorn.run(
        "versemem.server:app",
        host=host or config.host,
        port=port or config.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@config_app.command("path")
def config_path():
    """Print the config file locations, first match wins."""
    for candidate in config_file_candidates():
        marker = "*" if candidate.exists() else " "
        typer.echo(f"{marker} {candidate}")


def main():
    app()


if __name__ == "__main__":
    main()
