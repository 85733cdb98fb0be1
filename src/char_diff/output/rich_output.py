"""Rich console renderer (default output mode)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from char_diff.core.models import HighlightType, LineType

if TYPE_CHECKING:
    from char_diff.core.errors import DiffError
    from char_diff.core.models import DiffData, DiffLine, DiffStats

_HIGHLIGHT_STYLES: dict[HighlightType, tuple[str, str]] = {
    HighlightType.added: ("green", "+"),
    HighlightType.removed: ("red", "-"),
}

_SNIPPET_LENGTH = 40


def _snippet(text: str, *, length: int = _SNIPPET_LENGTH) -> str:
    """Shorten text for a table cell, showing newlines as an escape."""
    text = text.replace("\n", "\\n")
    if len(text) <= length:
        return text
    return text[: length - 1] + "…"


class RichRenderer:
    """Reports diff data as a summary and a table of highlight ranges.

    Added ranges are shown in green with a '+' marker and removed ranges in
    red with a '-' marker. Removed text is not part of the rendered
    content and its range may be clamped, so removed rows only mark the
    anchor position.
    """

    def __init__(
        self,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        """Initialize with optional Rich consoles.

        Args:
            console: Rich Console instance. Defaults to Console() if None.
            error_console: Console for errors. Defaults to a stderr Console.
        """
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    def render(self, data: DiffData) -> None:
        """Report statistics, timing and every highlight range."""
        self._console.print(
            Text(f"{data.old_file.file_name} vs {data.new_file.file_name}", style="bold")
        )
        self.render_stats(data.stats)
        self._console.print(
            f"[dim]{data.metadata.total_characters} characters compared in "
            f"{data.metadata.calculation_time_ms:.1f} ms[/dim]"
        )
        for warning in data.metadata.warnings:
            self._console.print(f"[yellow]Warning: {warning}[/yellow]")

        for hunk in data.hunks:
            for line in hunk.lines:
                if line.type == LineType.context:
                    self._console.print("[dim]No differences[/dim]")
                elif line.highlight_ranges:
                    self._console.print(self._build_table(line))

    def render_stats(self, stats: DiffStats) -> None:
        """Render summary statistics."""
        self._console.print(
            f"[bold]{stats.changes}[/bold] characters changed: "
            f"[green]{stats.additions} added[/green], "
            f"[red]{stats.deletions} removed[/red]"
        )

    def render_error(self, error: DiffError) -> None:
        """Report a failed computation and how to recover from it."""
        self._error_console.print(Text(f"Error: {error}", style="bold red"))
        if error.offers_reduce_content:
            self._error_console.print("[dim]Reduce or clear the content, then try again.[/dim]")
        elif error.recoverable:
            self._error_console.print("[dim]Try again.[/dim]")

    def _build_table(self, line: DiffLine) -> Table:
        """Build a table with one row per highlight range."""
        table = Table(title="Highlight ranges", title_style="bold")
        table.add_column("Type", justify="center")
        table.add_column("Start", justify="right")
        table.add_column("End", justify="right")
        table.add_column("Text", no_wrap=True)

        for hl in line.highlight_ranges or ():
            style, prefix = _HIGHLIGHT_STYLES[hl.type]
            if hl.type == HighlightType.added:
                text = line.content[hl.start : hl.end]
            else:
                text = "(deleted text anchored here)"
            table.add_row(
                f"[{style}]{prefix} {hl.type.value}[/{style}]",
                str(hl.start),
                str(hl.end),
                Text(_snippet(text), style=style),
            )
        return table

