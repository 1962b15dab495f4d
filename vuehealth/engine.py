"""
Rule engine orchestration: run the enabled rules over parsed files and emit
engine messages (one LintResult per file), the same shape a full linter
engine reports and the normalizer consumes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from vuehealth.config import Config, get_default_config, get_enabled_rules
from vuehealth.context import FileContext
from vuehealth.findings.models import Finding, LintMessage, LintResult

logger = logging.getLogger(__name__)

_NUMERIC_SEVERITY = {"error": 2, "warning": 1}


def to_lint_message(rule_id: str, finding: Finding) -> LintMessage:
    return LintMessage(
        rule_id=rule_id,
        severity=_NUMERIC_SEVERITY.get(finding.severity, 1),
        message=finding.message,
        line=finding.location.line,
        column=finding.location.column,
    )


def lint_context(context: FileContext, config: Config, display_path: Optional[str] = None) -> LintResult:
    """Run every enabled rule on one file; a rule that raises is logged and skipped."""
    result = LintResult(file_path=display_path or str(context.path))
    for rule in get_enabled_rules(config):
        try:
            findings = rule.run(context, config)
        except Exception as exc:
            logger.exception("Rule %s failed on %s: %s", rule.qualified_id, context.path, exc)
            continue
        result.messages.extend(to_lint_message(rule.qualified_id, f) for f in findings)
    result.messages.sort(key=lambda m: (m.line, m.column))
    logger.debug("Linted %s: %d message(s)", result.file_path, len(result.messages))
    return result


def lint_contexts(
    contexts: Sequence[FileContext],
    config: Optional[Config] = None,
    root: Optional[Path] = None,
) -> list[LintResult]:
    """
    Lint each file context in order.

    When root is given, file paths in the results are made relative to it.
    """
    if config is None:
        config = get_default_config()
    results = []
    for ctx in contexts:
        display = None
        if root is not None:
            try:
                display = ctx.path.relative_to(root).as_posix()
            except ValueError:
                display = None
        results.append(lint_context(ctx, config, display_path=display))
    logger.info(
        "Linted %d file(s): %d message(s)",
        len(results),
        sum(len(r.messages) for r in results),
    )
    return results
