"""
Typer CLI for recall-scheduler.

Commands:
    recall advance QUALITY          - Compute the next review state
    recall status STATE_FILE        - Show due flag and memory strength
    recall dashboard NOTES_FILE     - Show strength and upcoming reviews

States are read from and written as the JSON record stored with a note
(easeFactor, interval, repetitions, nextReview, lastReviewed). Nothing is
saved by the CLI itself.

Usage:
    recall advance 5
    recall advance 4 --state note-42.json --now 2024-03-08T09:00:00Z
    recall status note-42.json
    recall dashboard notes.json --limit 6
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from recall.config import Settings, get_settings
from recall.core import RecallError, ReviewScheduler, ReviewState, SchedulerConfig
from recall.study import ReviewDashboard, ReviewItem, ReviewPriority

app = typer.Typer(
    help="recall: SM-2 spaced repetition scheduling for study notes",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

PRIORITY_STYLES = {
    ReviewPriority.HIGH: "red",
    ReviewPriority.MEDIUM: "yellow",
    ReviewPriority.LOW: "green",
}


# ========================================
# Helpers
# ========================================


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(code=1)


def _parse_now(value: str | None) -> datetime | None:
    """Parse an ISO-8601 --now value; a trailing Z means UTC."""
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        _fail(f"--now is not an ISO-8601 timestamp: {value}")
    if parsed.utcoffset() is None:
        _fail("--now must include a timezone offset (e.g. 2024-03-08T09:00:00Z)")
    return parsed


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _fail(f"File not found: {path}")
    except json.JSONDecodeError as e:
        _fail(f"{path} is not valid JSON: {e}")


def _settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        problems = "; ".join(
            ".".join(str(part) for part in error["loc"]) + f": {error['msg']}" for error in e.errors()
        )
        _fail(f"Invalid RECALL_* settings: {problems}")


def _scheduler() -> ReviewScheduler:
    return ReviewScheduler(SchedulerConfig.from_settings(_settings()))


def _strength_style(strength: int) -> str:
    if strength >= 80:
        return "green"
    if strength >= 50:
        return "yellow"
    return "red"


# ========================================
# Commands
# ========================================


@app.command()
def advance(
    quality: int = typer.Argument(..., help="Recall quality 0-5 (0 = blackout, 5 = perfect)"),
    state: Optional[Path] = typer.Option(
        None, "--state", "-s", help="JSON file holding the previous review state"
    ),
    now: Optional[str] = typer.Option(None, "--now", help="Review time (ISO-8601, with offset)"),
) -> None:
    """Compute the next review state and print it as JSON."""
    review_time = _parse_now(now)

    try:
        previous = ReviewState.from_record(_read_json(state)) if state else None
        new_state = _scheduler().advance(quality, previous, now=review_time)
    except RecallError as e:
        _fail(str(e))

    typer.echo(json.dumps(new_state.to_record(), indent=2))


@app.command()
def status(
    state: Path = typer.Argument(..., help="JSON file holding a review state"),
    now: Optional[str] = typer.Option(None, "--now", help="Evaluation time (ISO-8601, with offset)"),
) -> None:
    """Show whether a state is due and its current memory strength."""
    review_time = _parse_now(now)

    try:
        scheduler = _scheduler()
        review_state = ReviewState.from_record(_read_json(state))
        due = scheduler.is_due_for_review(review_state, now=review_time)
        strength = scheduler.get_memory_strength(review_state, now=review_time)
    except RecallError as e:
        _fail(str(e))

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Due", "[yellow]yes[/yellow]" if due else "[green]no[/green]")
    table.add_row("Strength", f"[{_strength_style(strength)}]{strength}%[/]")
    table.add_row("Ease factor", f"{review_state.ease_factor:.2f}")
    table.add_row("Interval", f"{review_state.interval}d")
    table.add_row("Repetitions", str(review_state.repetitions))
    table.add_row("Next review", review_state.next_review.isoformat())

    console.print(table)


@app.command()
def dashboard(
    notes: Path = typer.Argument(..., help="JSON list of notes with optional review_data"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Number of upcoming reviews to show"
    ),
    now: Optional[str] = typer.Option(None, "--now", help="Evaluation time (ISO-8601, with offset)"),
) -> None:
    """Summarize memory strength and upcoming reviews across notes."""
    review_time = _parse_now(now)
    limit = limit or _settings().upcoming_limit

    data = _read_json(notes)
    if not isinstance(data, list):
        _fail(f"{notes} must contain a JSON list of notes")

    try:
        items = [ReviewItem.from_note(note) for note in data]
        summary = ReviewDashboard(items, scheduler=_scheduler(), now=review_time).summary(limit)
    except RecallError as e:
        _fail(str(e))

    average = f"{summary.average_strength}%" if summary.reviewed_count else "N/A"
    console.print(f"\n[bold]Average memory strength:[/bold] {average}")
    console.print(
        f"[bold]Due reviews:[/bold] {summary.due_count} "
        f"({summary.high_priority_count} high priority)\n"
    )

    if summary.reviewed_count:
        trend = Table(title=f"Memory Strength ({len(summary.trend)} days)")
        trend.add_column("Day")
        trend.add_column("Strength", justify="right")
        for point in summary.trend:
            style = _strength_style(point.strength)
            trend.add_row(point.day.strftime("%a %b %d"), f"[{style}]{point.strength}%[/]")
        console.print(trend)
        console.print()

    if not summary.upcoming:
        console.print("[dim]No reviews scheduled yet.[/dim]")
        return

    table = Table(title="Upcoming Reviews")
    table.add_column("Note")
    table.add_column("Due")
    table.add_column("Priority")
    table.add_column("Strength", justify="right")

    for review in summary.upcoming:
        style = PRIORITY_STYLES[review.priority]
        strength = review.strength
        table.add_row(
            escape(review.title),
            review.due_in,
            f"[{style}]{review.priority.value}[/{style}]",
            f"[{_strength_style(strength)}]{strength}%[/]",
        )

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


def _log_level() -> str:
    # Invalid settings are reported by the command itself
    try:
        return get_settings().log_level.upper()
    except ValidationError:
        return "WARNING"


def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=_log_level(),
        format="<level>{level: <8}</level> | {message}",
    )

    app()


if __name__ == "__main__":
    main()
