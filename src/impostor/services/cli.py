"""Typer CLI entry point for running impostor sessions and maintaining word pools."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import structlog
import typer
from dotenv import load_dotenv

from ..config.settings import DEFAULT_CONFIG_PATH, EngineConfig, load_engine_config
from ..core.categories import CategoryError, CategoryManager, split_by_lines
from ..core.fsm import SessionStateMachine
from ..core.store import JsonFileStore
from ..core.words import WordPoolTracker, category_pool_key
from ..host import GameNarrator, SessionHost, console

LOGGER = structlog.get_logger(__name__)

app = typer.Typer(help="Play The Impostor on a single shared device.", invoke_without_command=False)
categories_app = typer.Typer(help="List, add and remove word categories.")
app.add_typer(categories_app, name="categories")

_configured_logging = False


def configure_logging(level: int = logging.INFO) -> None:
    global _configured_logging
    if _configured_logging:
        return
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured_logging = True


def _config(ctx: typer.Context) -> EngineConfig:
    return ctx.obj


def _store(ctx: typer.Context) -> JsonFileStore:
    return JsonFileStore(_config(ctx).store_path)


@app.callback()
def main(
    ctx: typer.Context,
    store: Optional[Path] = typer.Option(None, "--store", help="JSON file holding categories and word history"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to engine configuration JSON"),
) -> None:
    """Load configuration shared by every command."""

    load_dotenv()
    engine_config = load_engine_config(config)
    if store is not None:
        engine_config = replace(engine_config, store_path=store)
    ctx.obj = engine_config


@app.command("play")
def play(ctx: typer.Context) -> None:
    """Run an interactive session: pick words, set the table, pass the device around."""

    # Keep info logs off the screen the players are reading
    configure_logging(logging.WARNING)
    engine_config = _config(ctx)
    machine = SessionStateMachine(store=_store(ctx), config=engine_config)
    LOGGER.info("session.start", store=str(engine_config.store_path))
    SessionHost(machine, GameNarrator()).run()


@categories_app.command("list")
def list_categories(ctx: typer.Context) -> None:
    """Show every stored category with its word count."""

    configure_logging()
    manager = CategoryManager(_store(ctx), key_prefix=_config(ctx).key_prefix)
    GameNarrator().categories(manager.list_all())


@categories_app.command("add")
def add_category(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name of the category"),
    words_file: Path = typer.Option(..., "--words-file", exists=True, dir_okay=False, help="Text file, one word per line"),
) -> None:
    """Create a category from a word file."""

    configure_logging()
    manager = CategoryManager(_store(ctx), key_prefix=_config(ctx).key_prefix)
    words = split_by_lines(words_file.read_text(encoding="utf-8"))
    try:
        category = manager.create(name, words)
    except CategoryError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Created {category.name} ({len(category.words)} words) with id {category.id}")


@categories_app.command("remove")
def remove_category(
    ctx: typer.Context,
    category_id: str = typer.Argument(..., help="Id shown by 'categories list'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a category. Its used-word history is kept."""

    configure_logging()
    manager = CategoryManager(_store(ctx), key_prefix=_config(ctx).key_prefix)
    category = manager.get(category_id)
    if category is None:
        typer.echo(f"Error: unknown category {category_id!r}")
        raise typer.Exit(code=1)
    if not yes and not typer.confirm(f"Delete {category.name}?"):
        raise typer.Exit(code=0)
    manager.delete(category_id)
    typer.echo(f"Deleted {category.name}")


@app.command("history")
def history(
    ctx: typer.Context,
    category_id: str = typer.Argument(..., help="Category id whose used-word history to show"),
    reset: bool = typer.Option(False, "--reset", help="Forget every word shown so far"),
) -> None:
    """Show how much of a category's pool has been used, or reset it."""

    configure_logging()
    engine_config = _config(ctx)
    store = _store(ctx)
    manager = CategoryManager(store, key_prefix=engine_config.key_prefix)
    tracker = WordPoolTracker(store, key_prefix=engine_config.key_prefix)

    category = manager.get(category_id)
    if category is None:
        typer.echo(f"Error: unknown category {category_id!r}")
        raise typer.Exit(code=1)

    pool_key = category_pool_key(category.id)
    if reset:
        tracker.clear(pool_key)
        typer.echo(f"History cleared for {category.name}")
        return

    remaining = tracker.remaining(category.words, pool_key)
    total = len(set(category.words))
    console.print(f"[bold]{category.name}[/bold]: {total - len(remaining)} of {total} words used, {len(remaining)} left")


if __name__ == "__main__":  # pragma: no cover
    app()
