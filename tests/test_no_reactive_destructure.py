"""Unit tests for the no-reactive-destructure rule."""

from pathlib import Path

from vuehealth.context import build_context
from vuehealth.rules.no_reactive_destructure import NoReactiveDestructureRule


def _run_rule(source: bytes, path: Path | None = None) -> list:
    """Parse source, build context, run NoReactiveDestructureRule, return findings."""
    if path is None:
        path = Path("store.js")
    ctx = build_context(path, source)
    return NoReactiveDestructureRule().run(ctx, None)


def test_destructured_reactive_flagged():
    findings = _run_rule(b"const { count } = reactive({ count: 0 })\n")
    assert len(findings) == 1
    assert findings[0].rule_id == "no-reactive-destructure"
    assert findings[0].message_id == "noDestructure"
    assert findings[0].severity == "error"
    assert "toRefs()" in findings[0].message


def test_finding_points_at_declarator():
    findings = _run_rule(b"import { reactive } from 'vue'\n\nlet { a, b } = reactive({ a: 1, b: 2 })\n")
    loc = findings[0].location
    assert (loc.line, loc.column) == (3, 5)
    assert loc.snippet == "{ a, b } = reactive({ a: 1, b: 2 })"


def test_to_refs_not_flagged():
    assert _run_rule(b"const { count } = toRefs(reactive({ count: 0 }))\n") == []


def test_plain_binding_not_flagged():
    assert _run_rule(b"const state = reactive({ count: 0 })\n") == []


def test_array_pattern_not_flagged():
    assert _run_rule(b"const [first] = reactive([1, 2])\n") == []


def test_member_callee_not_flagged():
    assert _run_rule(b"const { x } = store.reactive({ x: 1 })\n") == []


def test_script_setup_in_component():
    source = b"""<script setup lang="ts">
import { reactive } from 'vue'
const { user } = reactive({ user: null as string | null })
</script>

<template><p>{{ user }}</p></template>
"""
    findings = _run_rule(source, Path("Profile.vue"))
    assert len(findings) == 1
    assert findings[0].location.line == 3
