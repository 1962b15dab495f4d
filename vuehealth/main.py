from __future__ import annotations

"""
Typer CLI entry point and orchestration of the health-check pipeline.

- Accepts a component/script file or a directory
- Runs the rule engine over every source file found
- Optionally merges the native linter's and the dead-code detector's JSON reports
- Filters ignored diagnostics, computes the score and prints the report
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from vuehealth.config import ConfigError, config_from_project, load_config
from vuehealth.context import load_contexts
from vuehealth.engine import lint_contexts
from vuehealth.filtering import filter_ignored_diagnostics
from vuehealth.findings.models import Diagnostic
from vuehealth.normalize import AnalyzerOutputError, normalize_knip_results, normalize_lint_results, normalize_oxlint_output
from vuehealth.reporting.console import print_diagnostics, print_summary
from vuehealth.rules.base import RuleConfigurationError
from vuehealth.scoring import calculate_score
from vuehealth.traversal import find_source_files, is_source_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="Vue Health - anti-pattern checks and a health score for Vue projects.")


def _collect_source_files(target: Path) -> List[Path]:
    """
    Resolve a target path into a list of files to analyze.

    - If target is a component or script file, return [target]
    - If target is a directory, use traversal.find_source_files()
    - Otherwise, exit with an error.
    """
    if target.is_file():
        if not is_source_file(target):
            raise typer.BadParameter(f"Target file must be a .vue or script file, got: {target}")
        return [target]

    if target.is_dir():
        files = find_source_files(target)
        if not files:
            logger.warning("No source files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _read_report(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise typer.BadParameter(f"Cannot read report {path}: {e}") from e


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Component, script file or project directory to analyze.",
    ),
    oxlint_report: Optional[Path] = typer.Option(
        None, "--oxlint", help="JSON report from the native linter (--format json)."
    ),
    knip_report: Optional[Path] = typer.Option(None, "--knip", help="JSON report from the dead-code detector."),
    lint: bool = typer.Option(True, "--lint/--no-lint", help="Run the built-in rule engine."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List files and lines for every rule."),
    score_only: bool = typer.Option(False, "--score-only", help="Print only the numeric score."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."),
) -> None:
    """
    Analyze a Vue project, print grouped diagnostics and a 0-100 health score.

    Project settings come from vue-health.config.json, .vue-health.json or the
    "vue-health" key of package.json in the project root.
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    started = time.perf_counter()
    root = target if target.is_dir() else target.parent
    console = Console()

    try:
        project = load_config(root)
        config = config_from_project(project)
    except (ConfigError, RuleConfigurationError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    verbose = verbose or bool(project and project.verbose)
    diagnostics: List[Diagnostic] = []

    if lint and (project is None or project.lint):
        contexts = load_contexts(_collect_source_files(target))
        results = lint_contexts(contexts, config, root=root)
        diagnostics.extend(normalize_lint_results(results))

    if oxlint_report is not None:
        try:
            diagnostics.extend(normalize_oxlint_output(_read_report(oxlint_report)))
        except AnalyzerOutputError as exc:
            logger.error("%s", exc)
            typer.echo("Lint check failed", err=True)

    if knip_report is not None and (project is None or project.dead_code):
        try:
            diagnostics.extend(normalize_knip_results(_read_report(knip_report), root=str(root)))
        except AnalyzerOutputError as exc:
            logger.error("%s", exc)
            typer.echo("Dead code detection failed", err=True)

    filtered = filter_ignored_diagnostics(diagnostics, config.ignore)
    score = calculate_score(filtered)

    if score_only:
        typer.echo(str(score.score))
        return

    print_diagnostics(filtered, verbose=verbose, console=console)
    print_summary(score, filtered, root.name, elapsed_seconds=time.perf_counter() - started, console=console)


def main() -> None:
    """Entry point for `python -m vuehealth.main` and the vue-health script."""
    app()


if __name__ == "__main__":
    main()
