import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing import Optional
from datetime import datetime, timedelta, timezone
from pathlib import Path
import json
import logging

from review_scheduler.config import settings
from review_scheduler.describe import describe_next_review
from review_scheduler.errors import InvalidInputError
from review_scheduler.quality import map_status_to_quality, validate_quality
from review_scheduler.schemas import ReviewRequest, ReviewState, StatusReviewRequest
from review_scheduler.sm2 import SM2Algorithm
from review_scheduler.stats import aggregate_stats

app = typer.Typer(help="Review Scheduler CLI - try out SM-2 flashcard scheduling by hand")
console = Console()


def _fail(message: str):
    console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(code=1)


def _parse_date(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now()
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        _fail(f"Invalid date '{value}'. Use YYYY-MM-DD")


def _load_states(file_path: Path):
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        _fail(f"Cannot read {file_path}: {e}")
    except json.JSONDecodeError as e:
        _fail(f"{file_path} is not valid JSON: {e}")

    if not isinstance(payload, list):
        _fail(f"{file_path} must contain a JSON list of review states")

    try:
        return [ReviewState.model_validate(item) for item in payload]
    except ValueError as e:
        _fail(f"Invalid review state in {file_path}: {e}")


def _state_table(title: Optional[str] = None) -> Table:
    table = Table(show_header=True, header_style="bold magenta", title=title)
    table.add_column("Easiness", style="cyan", justify="right")
    table.add_column("Interval", style="green", justify="right")
    table.add_column("Repetitions", style="yellow", justify="right")
    table.add_column("Next review", style="blue")
    return table


def _format_when(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every scheduling step")
):
    """Configure logging for all commands"""
    logging.basicConfig(
        level="DEBUG" if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )


@app.command()
def review(
    quality: Optional[str] = typer.Option(None, help="Quality rating 0-5"),
    status: Optional[str] = typer.Option(None, help="Binary judgment instead of quality (learned/review)"),
    easiness: float = typer.Option(2.5, help="Current easiness factor"),
    interval: int = typer.Option(0, help="Current interval in days"),
    repetitions: int = typer.Option(0, help="Current count of successful reviews"),
    review_date: Optional[str] = typer.Option(None, help="Review date (YYYY-MM-DD), default: now"),
    locale: Optional[str] = typer.Option(None, help="Label locale (en/pl)")
):
    """Apply one review to a card and show its new schedule"""
    if (quality is None) == (status is None):
        _fail("Give exactly one of --quality or --status")

    reviewed_at = _parse_date(review_date)
    try:
        if quality is not None:
            request = ReviewRequest(quality=quality, reviewed_at=reviewed_at)
            q = request.quality
        else:
            request = StatusReviewRequest(status=status, reviewed_at=reviewed_at)
            q = map_status_to_quality(request.status)
    except ValidationError as e:
        error = e.errors()[0]
        _fail(f"Invalid {error['loc'][0]} {error['input']!r}: {error['msg']}")
    except InvalidInputError as e:
        _fail(str(e))

    state = ReviewState(
        easiness_factor=easiness,
        interval_days=interval,
        repetition_count=repetitions
    )
    new_state = SM2Algorithm.schedule(state, q, now=request.reviewed_at)

    try:
        label = describe_next_review(new_state.next_review_at, now=reviewed_at, locale=locale)
    except InvalidInputError as e:
        _fail(str(e))

    verdict = "[green]passed[/green]" if SM2Algorithm.was_successful(q) else "[red]failed[/red]"
    console.print(f"\n[bold]Review with quality {q}/5[/bold] ({verdict})\n")

    table = _state_table()
    table.add_column("When", style="white")
    table.add_row(
        f"{state.easiness_factor:.2f}",
        f"{state.interval_days} d",
        str(state.repetition_count),
        "-",
        "before"
    )
    table.add_row(
        f"{new_state.easiness_factor:.2f}",
        f"{new_state.interval_days} d",
        str(new_state.repetition_count),
        _format_when(new_state.next_review_at),
        label
    )
    console.print(table)


@app.command()
def simulate(
    qualities: str = typer.Option(..., prompt="Quality ratings (comma-separated, e.g., 5,4,3,0,5)"),
    start_date: Optional[str] = typer.Option(None, help="First study date (YYYY-MM-DD), default: now"),
    locale: Optional[str] = typer.Option(None, help="Label locale (en/pl)")
):
    """Review a new card repeatedly, each time on its due date"""
    try:
        grades = [validate_quality(q) for q in qualities.split(",") if q.strip()]
    except InvalidInputError as e:
        _fail(str(e))

    if not grades:
        _fail("No quality ratings given")

    now = _parse_date(start_date)
    state = SM2Algorithm.initialize_state(now)

    table = Table(show_header=True, header_style="bold magenta", title="Card history")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Reviewed", style="white")
    table.add_column("Quality", justify="right")
    table.add_column("Easiness", style="cyan", justify="right")
    table.add_column("Interval", style="green", justify="right")
    table.add_column("Repetitions", style="yellow", justify="right")
    table.add_column("Next review", style="blue")

    for i, q in enumerate(grades, 1):
        reviewed_at = state.next_review_at
        state = SM2Algorithm.schedule(state, q, now=reviewed_at)
        try:
            label = describe_next_review(state.next_review_at, now=reviewed_at, locale=locale)
        except InvalidInputError as e:
            _fail(str(e))

        quality_str = f"[green]{q}[/green]" if SM2Algorithm.was_successful(q) else f"[red]{q}[/red]"
        table.add_row(
            str(i),
            reviewed_at.strftime("%Y-%m-%d"),
            quality_str,
            f"{state.easiness_factor:.2f}",
            f"{state.interval_days} d",
            str(state.repetition_count),
            f"{state.next_review_at.strftime('%Y-%m-%d')} ({label})"
        )

    console.print(table)


@app.command()
def describe(
    days: int = typer.Argument(..., help="Days until the next review"),
    locale: Optional[str] = typer.Option(None, help="Label locale (en/pl)")
):
    """Show the label for a review a given number of days away"""
    now = datetime.now()
    try:
        console.print(describe_next_review(now + timedelta(days=days), now=now, locale=locale))
    except InvalidInputError as e:
        _fail(str(e))


@app.command()
def stats(file_path: Path = typer.Argument(..., help="JSON file with a list of review states")):
    """Show learning progress for a batch of review states"""
    states = _load_states(file_path)
    result = aggregate_stats(states)

    console.print(f"\n[bold]Learning Progress[/bold] ({len(states)} cards)\n")
    console.print(f"[cyan]Statistics:[/cyan]")
    console.print(f"  Mastered: {result.mastered}")
    console.print(f"  In progress: {result.in_progress}")
    console.print(f"  New: {result.new}")
    console.print(f"  Average easiness: {result.average_easiness:.2f}")
    console.print(f"  Completion: {result.completion_percentage}%")


@app.command()
def due(
    file_path: Path = typer.Argument(..., help="JSON file with a list of review states"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of cards to show"),
    on_date: Optional[str] = typer.Option(None, help="Reference date (YYYY-MM-DD), default: now"),
    locale: Optional[str] = typer.Option(None, help="Label locale (en/pl)")
):
    """List review states that are due, most overdue first"""
    states = _load_states(file_path)

    now = _parse_date(on_date)
    if any(s.next_review_at is not None and s.next_review_at.tzinfo is not None for s in states):
        now = now.replace(tzinfo=timezone.utc)

    try:
        today_label = describe_next_review(now, now=now, locale=locale)
        due_states = SM2Algorithm.select_due(states, now=now, limit=limit)
    except InvalidInputError as e:
        _fail(str(e))
    except TypeError:
        _fail("Cannot mix naive and timezone-aware timestamps in one file")

    if not due_states:
        console.print("[yellow]No cards due for review[/yellow]")
        return

    table = _state_table(title="Cards Due for Review")
    table.add_column("Days Overdue", style="red", justify="right")
    for state in due_states:
        days_overdue = SM2Algorithm.get_days_overdue(state, now)
        table.add_row(
            f"{state.easiness_factor or 2.5:.2f}",
            f"{state.interval_days or 0} d",
            str(state.repetition_count or 0),
            _format_when(state.next_review_at),
            str(days_overdue) if days_overdue > 0 else today_label
        )

    console.print(table)


if __name__ == "__main__":
    app()
