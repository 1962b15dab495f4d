"""Unit tests for the no-expensive-inline-expression rule."""

from pathlib import Path

from vuehealth.context import build_context
from vuehealth.rules.no_expensive_inline_expression import NoExpensiveInlineExpressionRule


def _run_rule(source: bytes, path: Path | None = None) -> list:
    """Parse source, build context, run NoExpensiveInlineExpressionRule, return findings."""
    if path is None:
        path = Path("Table.vue")
    ctx = build_context(path, source)
    return NoExpensiveInlineExpressionRule().run(ctx, None)


def test_chained_transform_in_interpolation_flagged():
    source = b"<template>\n  <p>{{ items.filter(x => x.active).map(x => x.name) }}</p>\n</template>\n"
    findings = _run_rule(source)
    assert len(findings) == 1
    assert findings[0].message_id == "noExpensiveInline"
    loc = findings[0].location
    assert (loc.line, loc.column) == (2, 9)
    assert loc.snippet == "items.filter(x => x.active).map(x => x.name)"


def test_chained_transform_in_directive_flagged():
    source = b'<template><Chart :data="rows.sort(byDate).reduce(sum, 0)" /></template>'
    assert len(_run_rule(source)) == 1


def test_chained_transform_in_v_for_collection_flagged():
    source = b'<template><li v-for="u in users.filter(isActive).sort(byName)" :key="u.id">{{ u }}</li></template>'
    assert len(_run_rule(source)) == 1


def test_single_transform_not_flagged():
    assert _run_rule(b"<template><p>{{ items.filter(x => x) }}</p></template>") == []


def test_other_chain_not_flagged():
    assert _run_rule(b"<template><p>{{ name.trim().toUpperCase() }}</p></template>") == []


def test_three_step_chain_reported_per_link():
    source = b"<template><p>{{ a.filter(f).map(g).some(h) }}</p></template>"
    assert len(_run_rule(source)) == 2


def test_script_chains_not_flagged():
    source = b"""<script setup>
const names = computed(() => items.value.filter(x => x.active).map(x => x.name))
</script>
<template><p>{{ names }}</p></template>
"""
    assert _run_rule(source) == []
