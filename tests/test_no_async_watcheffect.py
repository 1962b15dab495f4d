"""Unit tests for the no-async-watcheffect rule."""

from pathlib import Path

from vuehealth.context import build_context
from vuehealth.rules.no_async_watcheffect import NoAsyncWatchEffectRule


def _run_rule(source: bytes, path: Path | None = None) -> list:
    """Parse source, build context, run NoAsyncWatchEffectRule, return findings."""
    if path is None:
        path = Path("effects.js")
    ctx = build_context(path, source)
    return NoAsyncWatchEffectRule().run(ctx, None)


def test_async_arrow_flagged():
    findings = _run_rule(b"watchEffect(async () => {\n  await load()\n})\n")
    assert len(findings) == 1
    assert findings[0].severity == "warning"
    assert findings[0].message_id == "noAsync"
    # reported at the callback, not the call
    assert (findings[0].location.line, findings[0].location.column) == (1, 13)


def test_async_function_expression_flagged():
    assert len(_run_rule(b"watchPostEffect(async function () { await tick() })\n")) == 1


def test_sync_effect_flagged_variants():
    source = b"watchSyncEffect(async (onCleanup) => { await x })\n"
    assert len(_run_rule(source)) == 1


def test_sync_callback_not_flagged():
    assert _run_rule(b"watchEffect(() => { load() })\n") == []


def test_watch_with_async_callback_not_flagged():
    assert _run_rule(b"watch(source, async () => { await load() })\n") == []


def test_callback_reference_not_flagged():
    assert _run_rule(b"watchEffect(run)\n") == []


def test_typescript_component():
    source = b"""<script setup lang="ts">
watchEffect(async (): Promise<void> => {
  await fetchUser()
})
</script>
"""
    findings = _run_rule(source, Path("User.vue"))
    assert len(findings) == 1
    assert findings[0].location.line == 2
