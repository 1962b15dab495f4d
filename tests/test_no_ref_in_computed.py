"""Unit tests for the no-ref-in-computed rule."""

from pathlib import Path

from vuehealth.context import build_context
from vuehealth.rules.no_ref_in_computed import NoRefInComputedRule


def _run_rule(source: bytes, path: Path | None = None) -> list:
    """Parse source, build context, run NoRefInComputedRule, return findings."""
    if path is None:
        path = Path("composable.js")
    ctx = build_context(path, source)
    return NoRefInComputedRule().run(ctx, None)


def test_ref_inside_computed_flagged():
    source = b"""
const double = computed(() => {
  const tmp = ref(0)
  return tmp.value * 2
})
"""
    findings = _run_rule(source)
    assert len(findings) == 1
    assert findings[0].data == {"name": "ref"}
    assert findings[0].message.startswith("Creating ref() inside computed()")
    assert findings[0].location.line == 3


def test_each_ref_kind_reported():
    source = b"computed(() => [shallowRef(1), customRef(f), toRef(o, 'k')])\n"
    findings = _run_rule(source)
    assert [f.data["name"] for f in findings] == ["shallowRef", "customRef", "toRef"]


def test_ref_outside_computed_not_flagged():
    source = b"const a = ref(0)\nconst b = computed(() => a.value + 1)\n"
    assert _run_rule(source) == []


def test_ref_after_computed_not_flagged():
    source = b"const b = computed(() => 1)\nconst a = ref(0)\n"
    assert _run_rule(source) == []


def test_nested_computed_keeps_outer_scope():
    source = b"const c = computed(() => computed(() => 1).value + shallowRef(2).value)\n"
    findings = _run_rule(source)
    assert len(findings) == 1
    assert findings[0].data == {"name": "shallowRef"}


def test_ref_inside_inner_computed_reported_once():
    source = b"computed(() => computed(() => ref(1)))\n"
    assert len(_run_rule(source)) == 1
