"""
Rendering of diff results for terminals and plain-text reports.

Styling is a lookup from a role name to a rich style string, so the same
rendering code produces colored and uncolored output.
"""
from typing import Optional

from rich.console import Console
from rich.text import Text

from core.comparison import ChangeType, DiffResult

ANSI_STYLES = {
    "header": "bold cyan",
    "removed": "red",
    "added": "green",
    "removed_strong": "bold reverse red",
    "added_strong": "bold reverse green",
    "summary": "dim",
}

PLAIN_STYLES = {role: "" for role in ANSI_STYLES}


def _line(marker: str, text: str, style: str) -> Text:
    line = Text()
    line.append(f"{marker} {text}", style=style)
    return line


def render_hunks(result: DiffResult, styles: Optional[dict] = None) -> list[Text]:
    """
    Render every hunk as a header followed by its change lines.

    Modifications become two lines with their distinct tokens in the
    `*_strong` styles.
    """
    styles = styles if styles is not None else ANSI_STYLES
    lines = []

    for hunk in result.hunks:
        lines.append(Text(f"@@ {hunk.section} @@", style=styles["header"]))

        for change in hunk.changes:
            if change.change_type == ChangeType.REMOVED:
                lines.append(_line("-", change.a, styles["removed"]))
            elif change.change_type == ChangeType.ADDED:
                lines.append(_line("+", change.b, styles["added"]))
            else:
                hl = change.highlight()
                for side, role in ((hl.removed, "removed"), (hl.added, "added")):
                    line = Text()
                    line.append(f"{side.marker} ", style=styles[role])
                    for segment in side.segments:
                        style = styles[f"{role}_strong"] if segment.distinct else styles[role]
                        line.append(segment.text, style=style)
                    lines.append(line)

        lines.append(Text(""))

    return lines


def render_summary(result: DiffResult) -> str:
    counts = result.counts()
    return (
        f"{counts['added']} added, {counts['removed']} removed, "
        f"{counts['modified']} modified"
    )


def render_text(result: DiffResult) -> str:
    """Generate an uncolored text report."""
    if result.is_identical:
        return "No changes"
    lines = [line.plain for line in render_hunks(result, PLAIN_STYLES)]
    lines.append(render_summary(result))
    return "\n".join(lines)


def make_console(color: str = "auto", **kwargs) -> Console:
    """
    Build a console for the given color mode.

    "auto" leaves detection to rich (tty, NO_COLOR, TERM), "always" forces
    ANSI output, "never" disables styling entirely.
    """
    if color == "always":
        return Console(force_terminal=True, highlight=False, **kwargs)
    if color == "never":
        return Console(no_color=True, color_system=None, highlight=False, **kwargs)
    if color != "auto":
        raise ValueError(f"unknown color mode: {color!r}")
    return Console(highlight=False, **kwargs)


def print_result(result: DiffResult, console: Console, title: Optional[str] = None):
    """Print a diff result, optionally under a title line."""
    if title:
        console.print(Text(title, style="bold"))
    if result.is_identical:
        console.print(Text("No changes", style=ANSI_STYLES["summary"]))
        return
    for line in render_hunks(result):
        console.print(line, soft_wrap=True)
    console.print(Text(render_summary(result), style=ANSI_STYLES["summary"]))
