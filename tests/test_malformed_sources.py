"""Every registered rule must tolerate broken components and scripts without raising."""

from pathlib import Path

import pytest

from vuehealth.config import RULE_CLASSES
from vuehealth.context import build_context

MALFORMED_SOURCES = {
    "unterminated-v-for": (
        "List.vue",
        b'<template><li v-for="(item, index in items" :key="index">{{ item }}</li></template>\n',
    ),
    "valueless-directives": ("List.vue", b"<template><li v-for :key>x</li></template>\n"),
    "empty-interpolation": ("Empty.vue", b"<template><p>{{ }}</p></template>\n"),
    "truncated-interpolation": ("Table.vue", b"<template><p>{{ a.filter( }}</p></template>\n"),
    "broken-script": ("Store.vue", b"<script>const { = reactive(</script>\n<template><p /></template>\n"),
    "empty-component": ("Blank.vue", b""),
    "empty-script": ("blank.js", b""),
    "broken-plain-script": ("broken.ts", b"watchEffect(async ( => {\nemit('x'\nconst { a } = reactive(\n"),
}


@pytest.mark.parametrize("rule_cls", RULE_CLASSES, ids=lambda cls: cls.id)
@pytest.mark.parametrize("name", sorted(MALFORMED_SOURCES))
def test_rule_survives_malformed_source(rule_cls, name):
    filename, source = MALFORMED_SOURCES[name]
    ctx = build_context(Path(filename), source)
    findings = rule_cls().run(ctx, None)
    assert isinstance(findings, list)
    for finding in findings:
        assert finding.location.line >= 1


def test_malformed_sources_are_flagged_as_parse_errors():
    ctx = build_context(Path("Store.vue"), MALFORMED_SOURCES["broken-script"][1])
    assert ctx.has_parse_errors is True
