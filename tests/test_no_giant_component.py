"""Unit tests for the no-giant-component rule."""

from pathlib import Path

import pytest

from vuehealth.context import build_context
from vuehealth.rules.base import RuleConfigurationError
from vuehealth.rules.no_giant_component import DEFAULT_THRESHOLD, NoGiantComponentRule


def _run_rule(source: bytes, path: Path | None = None, options: list | None = None) -> list:
    """Parse source, build context, run NoGiantComponentRule, return findings."""
    if path is None:
        path = Path("big.js")
    ctx = build_context(path, source)
    return NoGiantComponentRule(options=options).run(ctx, None)


def _lines(n: int) -> bytes:
    return "\n".join(f"const v{i} = {i}" for i in range(n)).encode()


def test_over_threshold_flagged():
    findings = _run_rule(_lines(301))
    assert len(findings) == 1
    assert findings[0].data == {"lines": "301", "threshold": "300"}
    assert findings[0].message == (
        "Script block has 301 lines (threshold: 300). "
        "Consider splitting into smaller composables or components."
    )
    assert findings[0].location.line == 1


def test_at_threshold_not_flagged():
    assert _run_rule(_lines(DEFAULT_THRESHOLD)) == []


def test_trailing_newline_counts_as_line():
    assert len(_run_rule(_lines(300) + b"\n")) == 1


def test_custom_threshold():
    findings = _run_rule(_lines(11), options=[{"threshold": 10}])
    assert findings[0].data == {"lines": "11", "threshold": "10"}


def test_template_lines_not_counted():
    template = b"<template>\n" + b"  <p>row</p>\n" * 500 + b"</template>\n"
    source = b"<script setup>\nconst a = 1\n</script>\n" + template
    assert _run_rule(source, Path("Page.vue")) == []


def test_component_script_counted():
    source = b"<script setup>\n" + _lines(20) + b"\n</script>\n<template><p /></template>\n"
    findings = _run_rule(source, Path("Page.vue"), options=[{"threshold": 5}])
    assert len(findings) == 1
    assert int(findings[0].data["lines"]) > 20


@pytest.mark.parametrize("options", [[{"threshold": 0}], [{"max": 3}], [{"threshold": "big"}], [{}, {}]])
def test_invalid_options_rejected(options):
    with pytest.raises(RuleConfigurationError):
        NoGiantComponentRule(options=options)
