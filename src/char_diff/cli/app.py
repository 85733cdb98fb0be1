"""CLI entry point for char-diff."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

import typer

from char_diff.core.calculator import DiffCalculator
from char_diff.core.errors import DiffError
from char_diff.core.models import (
    MAX_SINGLE_SIDE,
    MAX_TOTAL_CHARACTERS,
    TIMEOUT_MS,
    DiffLimits,
    OutputMode,
)
from char_diff.logging_utils import configure_logging
from char_diff.output.rich_output import RichRenderer

if TYPE_CHECKING:
    from char_diff.output.base import Renderer

app = typer.Typer(
    name="char-diff",
    help="Compare two texts character by character.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from char_diff import __version__

        typer.echo(f"char-diff {__version__}")
        raise typer.Exit()


def _parse_output_mode(value: str) -> OutputMode:
    """Parse output string to OutputMode enum."""
    try:
        return OutputMode(value)
    except ValueError:
        valid = ", ".join(o.value for o in OutputMode)
        msg = f"Invalid output mode '{value}'. Choose from: {valid}"
        raise typer.BadParameter(msg) from None


def _build_limits(*, max_total: int, max_side: int) -> DiffLimits:
    """Build DiffLimits from CLI flags."""
    try:
        return DiffLimits(max_total_characters=max_total, max_single_side=max_side)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from None


def _get_renderer(output_mode: OutputMode) -> Renderer:
    """Get the appropriate renderer for the output mode."""
    if output_mode == OutputMode.json:
        from char_diff.output.json_output import JsonRenderer

        return JsonRenderer()
    return RichRenderer()


@app.command()
def main(
    left: Annotated[
        str,
        typer.Argument(help="Original text."),
    ],
    right: Annotated[
        str,
        typer.Argument(help="Modified text."),
    ],
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Output mode: rich or json."),
    ] = "rich",
    stat: Annotated[
        bool,
        typer.Option("--stat", help="Show only summary statistics."),
    ] = False,
    timeout: Annotated[
        int,
        typer.Option("--timeout", "-t", help="Time budget in milliseconds."),
    ] = TIMEOUT_MS,
    max_total: Annotated[
        int,
        typer.Option("--max-total", help="Maximum combined characters."),
    ] = MAX_TOTAL_CHARACTERS,
    max_side: Annotated[
        int,
        typer.Option("--max-side", help="Maximum characters per side."),
    ] = MAX_SINGLE_SIDE,
    isolate: Annotated[
        bool,
        typer.Option("--isolate", help="Run the diff in a child process killed on timeout."),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
    ] = "WARNING",
    log_file: Annotated[
        str | None,
        typer.Option("--log-file", help="Also append log records to this file."),
    ] = None,
    trace: Annotated[
        bool,
        typer.Option("--trace", help="Include timestamps and logger names in log output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Compare two texts character by character.

    Reports the character-level changes from LEFT to RIGHT.

    Escape sequences are not interpreted; pass real newlines to compare
    multi-line text.
    """
    configure_logging(log_level, log_file, trace_mode=trace)
    output_mode = _parse_output_mode(output)
    if timeout <= 0:
        msg = f"Timeout must be positive, got {timeout}"
        raise typer.BadParameter(msg)
    limits = _build_limits(max_total=max_total, max_side=max_side)

    calculator = DiffCalculator(limits, timeout_ms=timeout, isolate=isolate)

    renderer = _get_renderer(output_mode)
    try:
        data = calculator.compute(left, right)
    except DiffError as exc:
        renderer.render_error(exc)
        raise typer.Exit(code=2) from None

    if stat:
        renderer.render_stats(data.stats)
    else:
        renderer.render(data)
