# Rich console output: rule-grouped diagnostics and the score summary panel.

from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vuehealth.findings.models import Diagnostic, ScoreResult
from vuehealth.scoring import PERFECT_SCORE, SCORE_GOOD_THRESHOLD, SCORE_OK_THRESHOLD, group_by_rule

SCORE_BAR_WIDTH_CHARS = 40

SEVERITY_ORDER = {"error": 0, "warning": 1}

# Severity -> Rich style
SEVERITY_STYLE = {
    "error": "bold red",
    "warning": "bold yellow",
}

SEVERITY_SYMBOL = {
    "error": "✗",
    "warning": "⚠",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: str) -> str:
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _score_style(score: int) -> str:
    if score >= SCORE_GOOD_THRESHOLD:
        return "bold green"
    if score >= SCORE_OK_THRESHOLD:
        return "bold yellow"
    return "bold red"


def _file_lines(diagnostics: Sequence[Diagnostic]) -> dict[str, list[int]]:
    """Lines per file for one rule; line 0 (file-level) contributes only the file."""
    by_file: dict[str, list[int]] = {}
    for d in diagnostics:
        lines = by_file.setdefault(d.file_path, [])
        if d.line > 0:
            lines.append(d.line)
    return by_file


def print_diagnostics(
    diagnostics: Sequence[Diagnostic],
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print one entry per rule, errors first: message, occurrence count and help.
    If verbose, list the files and lines each rule was reported at.
    """
    console = console or Console()
    if not diagnostics:
        console.print(Text("  No issues found!", style="bold green"))
        console.print()
        return

    groups = sorted(
        group_by_rule(diagnostics).values(),
        key=lambda group: SEVERITY_ORDER.get(group[0].severity, 1),
    )
    for group in groups:
        first = group[0]
        style = _severity_style(first.severity)
        line = Text(" ")
        line.append(SEVERITY_SYMBOL.get(first.severity, "⚠"), style=style)
        line.append(f" {first.message}")
        if len(group) > 1:
            line.append(f" ({len(group)})", style=style)
        line.append(f"  [{first.rule_key}]", style="dim")
        console.print(line)
        if first.help:
            for help_line in first.help.splitlines():
                console.print(Text(f"    {help_line}", style="dim"))

        if verbose:
            for path, lines in _file_lines(group).items():
                label = f": {', '.join(str(n) for n in lines)}" if lines else ""
                console.print(Text(f"    {path}{label}", style="dim"))
        console.print()


def _score_bar(score: int) -> Text:
    filled = round(score / PERFECT_SCORE * SCORE_BAR_WIDTH_CHARS)
    bar = Text("█" * filled, style=_score_style(score))
    bar.append("░" * (SCORE_BAR_WIDTH_CHARS - filled), style="dim")
    return bar


def print_category_table(diagnostics: Sequence[Diagnostic], console: Console) -> None:
    """Print counts per category and severity."""
    counts: dict[str, dict[str, int]] = {}
    for d in diagnostics:
        row = counts.setdefault(d.category, {"error": 0, "warning": 0})
        row[d.severity] = row.get(d.severity, 0) + 1

    table = Table(
        title="Categories",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Category", style="white")
    table.add_column("Errors", justify="right", width=8)
    table.add_column("Warnings", justify="right", width=8)
    for category in sorted(counts):
        row = counts[category]
        table.add_row(
            category,
            Text(str(row["error"]), style=_severity_style("error") if row["error"] else "dim"),
            Text(str(row["warning"]), style=_severity_style("warning") if row["warning"] else "dim"),
        )
    console.print(table)


def print_summary(
    score: ScoreResult,
    diagnostics: Sequence[Diagnostic],
    project_name: str,
    elapsed_seconds: Optional[float] = None,
    console: Optional[Console] = None,
) -> None:
    """Print the score panel: score, label, bar, issue count and elapsed time."""
    console = console or Console()
    style = _score_style(score.score)

    body = Text()
    body.append("Score: ")
    body.append(f"{score.score}/{PERFECT_SCORE} ", style=style)
    body.append(score.label, style=style)
    body.append("\n")
    body.append_text(_score_bar(score.score))
    details = [f"Issues: {len(diagnostics)}"]
    if elapsed_seconds is not None:
        details.append(f"Time: {elapsed_seconds * 1000:.0f}ms" if elapsed_seconds < 1 else f"Time: {elapsed_seconds:.1f}s")
    body.append("\n" + " · ".join(details), style="dim")

    if diagnostics:
        print_category_table(diagnostics, console)
    console.print(
        Panel(
            body,
            title=f"Vue Health: {project_name}",
            border_style=style.replace("bold ", ""),
            box=box.ROUNDED,
        )
    )
