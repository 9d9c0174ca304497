from __future__ import annotations

from typing import Optional

from rich.table import Table
from rich.text import Text

from diffpane.core.types import DiffLine, DiffLineKind, DisplayMode, ParsedDiff

LINE_STYLES = {
    DiffLineKind.ADDITION: "green",
    DiffLineKind.DELETION: "red",
    DiffLineKind.HEADER: "cyan",
    DiffLineKind.CONTEXT: "",
}


def _number(value: Optional[int]) -> Text:
    return Text("" if value is None else str(value), style="dim")


def _content(line: DiffLine) -> Text:
    # Text(), not markup: diff content routinely contains "[...]".
    return Text(line.text, style=LINE_STYLES[line.kind], no_wrap=True, overflow="ellipsis")


def render_title(parsed: ParsedDiff) -> Text:
    title = Text(parsed.file_name or "Diff", style="bold")
    if parsed.stats.additions or parsed.stats.deletions:
        title.append(f"  +{parsed.stats.additions}", style="bold green")
        title.append(f" -{parsed.stats.deletions}", style="bold red")
    return title


def render_inline(parsed: ParsedDiff) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
    table.add_column("old", justify="right", no_wrap=True)
    table.add_column("new", justify="right", no_wrap=True)
    table.add_column("gutter", width=1, no_wrap=True)
    table.add_column("text", ratio=1)
    for line in parsed.lines:
        table.add_row(
            _number(line.old_line_number),
            _number(line.new_line_number),
            Text(line.gutter, style=LINE_STYLES[line.kind]),
            _content(line),
        )
    return table


def render_side_by_side(parsed: ParsedDiff) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
    table.add_column("old", justify="right", no_wrap=True)
    table.add_column("left", ratio=1)
    table.add_column("new", justify="right", no_wrap=True)
    table.add_column("right", ratio=1)
    for left, right in parsed.side_by_side().rows():
        table.add_row(
            _number(left.old_line_number),
            _content(left),
            _number(right.new_line_number),
            _content(right),
        )
    return table


def render(parsed: ParsedDiff, mode: DisplayMode = DisplayMode.INLINE) -> Table:
    if mode == DisplayMode.SIDE_BY_SIDE:
        return render_side_by_side(parsed)
    return render_inline(parsed)
