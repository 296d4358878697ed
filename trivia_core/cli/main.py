"""
Typer CLI for the trivia content engine.

Commands:
    trivia content stats      - Load content and show category/tier counts
    trivia content validate   - Check a content document and list skipped records
    trivia draw               - Draw a batch of questions for a path
    trivia rewards            - Show checkpoint reward schedules
    trivia fallback           - Simulate a game over and show the recovery

Usage:
    trivia --help
    trivia draw --path dogBreeds --count 5 --level 2
    trivia rewards --accuracy 0.85
    trivia fallback --path dogTraining --answered 17
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import Settings, get_settings
from trivia_core.content.models import ContentCategory, DifficultyTier, PathType
from trivia_core.content.repository import ContentRepository
from trivia_core.core.diagnostics import DiagnosticsLog
from trivia_core.core.exceptions import ContentLoadError
from trivia_core.engine import TriviaEngine, build_engine
from trivia_core.progression.checkpoint_rewards import CheckpointRewardCalculator
from trivia_core.progression.difficulty_progression import (
    difficulty_level_for_question_count,
    level_for_progress,
)
from trivia_core.progression.models import Checkpoint, PathProgressState, PowerUpKind

app = typer.Typer(
    help="Adaptive trivia content engine: content, selection and progression tools",
    no_args_is_help=True,
)
content_app = typer.Typer(help="Content source commands", no_args_is_help=True)
app.add_typer(content_app, name="content")

console = Console()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Loguru level (default from settings)"),
):
    """Configure logging for every command."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(log_level or get_settings().log_level).upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def _engine(**overrides) -> TriviaEngine:
    settings: Settings = get_settings()
    if overrides:
        settings = settings.model_copy(update=overrides)
    return build_engine(settings)


def _print_diagnostics(diagnostics: DiagnosticsLog, limit: int = 10) -> None:
    entries = diagnostics.recent(limit)
    if not entries:
        return
    rprint(f"\n[yellow]Diagnostics ({diagnostics.count()} total, last {len(entries)}):[/yellow]")
    for entry in entries:
        rprint(f"  [{entry.severity.value}] {entry.kind}: {entry.message}")


# ========================================
# Content Commands
# ========================================


@content_app.command("stats")
def content_stats() -> None:
    """Load content and show items per category and tier."""
    engine = _engine()

    async def load():
        document = await engine.repository.load_all()
        await engine.cache.preload(ContentCategory)
        return document

    try:
        document = asyncio.run(load())
    except ContentLoadError as exc:
        rprint(f"[red]Content could not be loaded: {exc}[/red]")
        raise typer.Exit(1)

    report = engine.repository.load_report
    rprint(f"[cyan]Source:[/cyan] {report.source.value} ({report.source_name})")
    rprint(f"[cyan]Loaded:[/cyan] {report.loaded_items}  [cyan]Skipped:[/cyan] {report.skipped_items}")

    table = Table(title="Content by Category")
    table.add_column("Category", style="cyan")
    for tier in DifficultyTier:
        table.add_column(tier.value, justify="right")
    table.add_column("Total", style="green", justify="right")

    for category in ContentCategory:
        items = document.get(category, [])
        counts = [sum(1 for item in items if item.tier == tier) for tier in DifficultyTier]
        table.add_row(category.display_name, *(str(c) for c in counts), str(len(items)))

    console.print(table)

    stats = engine.cache.stats()
    rprint(
        f"\n[cyan]Cache:[/cyan] {len(stats.resident_categories)} resident "
        f"({', '.join(c.value for c in stats.resident_categories)}), "
        f"{stats.total_items} items, ~{stats.memory_usage_kb} KB"
    )


@content_app.command("validate")
def content_validate(
    source: Path = typer.Argument(..., help="Content document (JSON)"),
    legacy: bool = typer.Option(False, "--legacy", help="Treat the file as a legacy difficulty-keyed document"),
    show: int = typer.Option(10, "--show", help="Skipped records to list"),
):
    """Parse a content document without falling back to other sources."""
    if not source.exists():
        console.print(f"[red]Error: Source not found: {source}[/red]")
        raise typer.Exit(1)

    diagnostics = DiagnosticsLog()
    repository = ContentRepository(
        primary_path=None if legacy else source,
        legacy_path=source if legacy else None,
        use_builtin_samples=False,
        fallback_locale=get_settings().fallback_locale,
        diagnostics=diagnostics,
    )

    try:
        asyncio.run(repository.load_all())
    except ContentLoadError as exc:
        rprint(f"[red]Invalid ({exc.reason.value}): {exc}[/red]")
        _print_diagnostics(diagnostics, show)
        raise typer.Exit(1)

    report = repository.load_report
    rprint(f"[green]Valid[/green]: {report.loaded_items} items, {report.skipped_items} skipped")
    skipped = [e for e in diagnostics.recent(diagnostics.count()) if e.kind == "ItemParseError"]
    for entry in skipped[:show]:
        rprint(f"  [yellow]-[/yellow] {entry.message}")


# ========================================
# Selection
# ========================================


@app.command("draw")
def draw(
    path: PathType = typer.Option(PathType.DOG_TRIVIA, "--path", "-p", help="Themed path"),
    count: int = typer.Option(5, "--count", "-n", help="Questions to draw"),
    level: Optional[int] = typer.Option(None, "--level", "-l", help="Difficulty level (1-5)"),
    answered: int = typer.Option(0, "--answered", help="Questions answered so far (sets the level if --level is omitted)"),
    exclude: Optional[str] = typer.Option(None, "--exclude", "-x", help="Comma-separated ids already shown"),
    locale: str = typer.Option("de", "--locale", help="Display locale"),
    seed: Optional[str] = typer.Option(None, "--seed", help="Seed for a reproducible shuffle"),
    match_any: bool = typer.Option(False, "--any", help="Ignore path relevance"),
):
    """Draw a batch of questions for a path."""
    overrides: dict = {}
    if seed is not None:
        overrides["shuffle_seed"] = seed
    if match_any:
        overrides["path_filter_mode"] = "any"
    engine = _engine(**overrides)
    exclude_ids = {i.strip() for i in (exclude or "").split(",") if i.strip()}
    if level is None:
        level = difficulty_level_for_question_count(answered)

    try:
        items = asyncio.run(engine.pool_manager.draw(path, exclude_ids, count, level))
    except ContentLoadError as exc:
        rprint(f"[red]Content could not be loaded: {exc}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{len(items)} question(s) for {path.display_name} (level {level})")
    table.add_column("ID", style="dim")
    table.add_column("Category", style="cyan")
    table.add_column("Tier")
    table.add_column("Question")

    for item in items:
        marker = " [yellow](repeat)[/yellow]" if item.id in exclude_ids else ""
        table.add_row(item.id, item.category.value, item.tier.value, item.text_for(locale) + marker)

    console.print(table)

    expansion = engine.pool_manager.last_expansion(path)
    if expansion:
        rprint(f"[yellow]Pool expanded via {expansion.value}[/yellow]")


# ========================================
# Progression
# ========================================


@app.command("rewards")
def rewards(
    checkpoint: Optional[Checkpoint] = typer.Option(None, "--checkpoint", "-c", help="Single checkpoint"),
    accuracy: float = typer.Option(0.0, "--accuracy", "-a", help="Accuracy 0.0-1.0"),
):
    """Show power-up rewards per checkpoint."""
    calculator = CheckpointRewardCalculator(bonus_threshold=get_settings().bonus_accuracy_threshold)
    checkpoints = [checkpoint] if checkpoint else list(Checkpoint)

    table = Table(title=f"Checkpoint Rewards (accuracy {accuracy:.0%})")
    table.add_column("Checkpoint", style="cyan")
    table.add_column("Questions", justify="right")
    for kind in PowerUpKind:
        table.add_column(kind.value, justify="right")
    table.add_column("Total", style="green", justify="right")

    for cp in checkpoints:
        granted = calculator.rewards_for(cp, accuracy)
        table.add_row(
            cp.display_name,
            str(cp.questions_required),
            *(str(granted[kind]) for kind in PowerUpKind),
            str(calculator.total_reward_count(cp, accuracy)),
        )

    console.print(table)

    problems = calculator.distribution_problems()
    if problems:
        for problem in problems:
            rprint(f"[red]✗[/red] {problem}")
        raise typer.Exit(1)
    rprint("[green]✓[/green] Reward schedule is non-decreasing")


@app.command("fallback")
def fallback(
    path: PathType = typer.Option(PathType.DOG_BREEDS, "--path", "-p", help="Themed path"),
    answered: int = typer.Option(0, "--answered", help="Questions answered before game over"),
    correct: Optional[int] = typer.Option(None, "--correct", help="Correct answers (default: all)"),
):
    """Simulate a game over and show how the path recovers."""
    engine = _engine()
    progress = PathProgressState(
        path=path,
        current_checkpoint=Checkpoint.reached_at(answered),
        answered_ids=[f"q-{n}" for n in range(1, answered + 1)],
        lives_remaining=0,
        questions_answered=answered,
        correct_answers=answered if correct is None else correct,
    )

    result = engine.fallback.handle_game_over(progress)
    stats = engine.fallback.fallback_statistics(result)

    table = Table(title="Fallback Result")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in stats.items():
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)

    rprint(f"[dim]States: {' -> '.join(s.value for s in result.trace)}[/dim]")
    resumed = getattr(result, "progress", None)
    if resumed is not None:
        rprint(f"Next draw level: {level_for_progress(resumed)}")
    _print_diagnostics(engine.diagnostics)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
