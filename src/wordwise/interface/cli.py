"""wordwise CLI — interactive study sessions and word list inspection."""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Annotated

import typer

from wordwise.application.config import resolve_config
from wordwise.application.study.score_model import difficulty_label
from wordwise.domain.constants import MAX_LEVEL, MIN_LEVEL, MIN_SCORE
from wordwise.domain.study.models import ScoreChange, SessionStats
from wordwise.domain.study.ports import WordStoreError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="wordwise: adaptive vocabulary study.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage wordwise configuration.")
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

_LOG_LEVELS = {0: logging.WARNING, 1: logging.WARNING, 2: logging.INFO}


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
    """Global settings for wordwise."""
    logging.getLogger("wordwise").setLevel(_LOG_LEVELS.get(verbose, logging.DEBUG))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

_ACTIONS = "[y] know  [n] don't know  [s] skip  [b] back  [u] undo last  [q] quit"


@app.command()
def study(
    words_file: Annotated[
        Path | None, typer.Option("--words", help="YAML word list. Defaults to config.")
    ] = None,
    set_id: Annotated[str | None, typer.Option("--set", help="Only study this word set.")] = None,
    limit: Annotated[int | None, typer.Option(help="Study at most this many words.")] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for a reproducible order.")] = None,
):
    """[bold green]Study[/bold green] words with adaptive scoring."""
    from wordwise.application.factory import get_session_manager, get_word_repository
    from wordwise.infrastructure.scheduling import ManualScheduler

    config = resolve_config(
        {
            "words_file": words_file,
            "set_id": set_id,
            "shuffle_seed": seed,
        }
    )
    repo = get_word_repository(config)

    try:
        words = repo.load_words(config.set_id)
    except WordStoreError as e:
        typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1)

    if limit is not None:
        words = words[: max(limit, 0)]
    if not words:
        typer.secho("No words to study.", fg="yellow")
        raise typer.Exit()

    scheduler = ManualScheduler()
    manager = get_session_manager(config, repository=repo, scheduler=scheduler)
    manager.start_study_session(words)
    typer.echo(f"Studying {len(words)} words. {_ACTIONS}")

    try:
        while manager.is_study_active:
            word = manager.current_word
            typer.echo("")
            typer.secho(
                f"[{manager.current_index + 1}/{len(manager.study_words)}] {word.text}",
                bold=True,
            )
            shown_at = time.monotonic()
            action = typer.prompt(">", default="", show_default=False).strip().lower()
            elapsed_ms = (time.monotonic() - shown_at) * 1000

            if action in ("y", "n"):
                manager.respond_to_word(action == "y", elapsed_ms)
                if word.word.text2:
                    typer.echo(f"  = {word.word.text2}")
                if manager.last_score_change:
                    typer.echo(f"  {format_score_change(manager.last_score_change)}")
                scheduler.run_pending()
            elif action == "s":
                if manager.has_next_word:
                    manager.skip_word()
                else:
                    manager.end_study_session()
            elif action == "b":
                manager.go_to_previous_word()
            elif action == "u":
                manager.go_to_previous_word()
                manager.rollback_response()
            elif action == "q":
                manager.end_study_session()
            else:
                typer.echo(_ACTIONS)
    except (KeyboardInterrupt, typer.Abort):
        typer.echo("")
    except WordStoreError as e:
        typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1)
    finally:
        manager.close()

    typer.echo("")
    typer.echo(format_session_stats(manager.session_stats))


@app.command()
def words(
    words_file: Annotated[
        Path | None, typer.Option("--words", help="YAML word list. Defaults to config.")
    ] = None,
    set_id: Annotated[str | None, typer.Option("--set", help="Only list this word set.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List words with their difficulty level and internal score."""
    from wordwise.application.factory import get_word_repository

    config = resolve_config({"words_file": words_file, "set_id": set_id})
    try:
        items = get_word_repository(config).load_words(config.set_id)
    except WordStoreError as e:
        typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1)

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": w.id,
                        "text1": w.text1,
                        "text2": w.text2,
                        "difficulty": w.difficulty,
                        "internal_score": w.internal_score,
                    }
                    for w in items
                ],
                indent=2,
            )
        )
        return

    for w in items:
        score = f"{w.internal_score:.1f}" if w.internal_score is not None else "-"
        label = difficulty_label(w.difficulty)
        typer.echo(f"{w.id:>5}  {w.text1:<24} {w.text2:<24} {label:<10} {score}")


@app.command()
def levels():
    """Show the internal score band behind each difficulty level."""
    for level in range(MIN_LEVEL, MAX_LEVEL + 1):
        low = MIN_SCORE + (level - MIN_LEVEL)
        high = low + 1.0
        closing = "]" if level == MAX_LEVEL else ")"
        typer.echo(f"{level}  {difficulty_label(level):<10} [{low:.1f}, {high:.1f}{closing}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_score_change(change: ScoreChange) -> str:
    """e.g. '-0.8 (3.0 -> 2.2), now Easy'"""
    label = difficulty_label(change.new_level)
    return (
        f"{change.score_difference:+.1f} "
        f"({change.previous_score:.1f} -> {change.new_score:.1f}), now {label}"
    )


def format_session_stats(stats: SessionStats) -> str:
    return (
        f"Answered {stats.total_words}: {stats.correct_answers} known, "
        f"{stats.incorrect_answers} unknown ({stats.accuracy:.1f}%). "
        f"Longest streak {stats.longest_streak}, "
        f"average score change {stats.avg_score_change:+.2f}."
    )
