"""Drop diagnostics the project config asks to ignore."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from vuehealth.findings.models import Diagnostic, IgnoreConfig

logger = logging.getLogger(__name__)


def is_ignored(diagnostic: Diagnostic, ignored_rules: set[str], ignored_files: Sequence[str]) -> bool:
    if diagnostic.rule_key in ignored_rules or diagnostic.rule in ignored_rules:
        return True
    # literal substring match, not a glob
    return any(pattern in diagnostic.file_path for pattern in ignored_files)


def filter_ignored_diagnostics(
    diagnostics: Sequence[Diagnostic],
    ignore: Optional[IgnoreConfig],
) -> list[Diagnostic]:
    """Return diagnostics minus ignored rules and files; None leaves them untouched."""
    if ignore is None:
        return list(diagnostics)

    ignored_rules = set(ignore.rules)
    kept = [d for d in diagnostics if not is_ignored(d, ignored_rules, ignore.files)]
    logger.debug("Ignore filter dropped %d of %d diagnostic(s)", len(diagnostics) - len(kept), len(diagnostics))
    return kept
