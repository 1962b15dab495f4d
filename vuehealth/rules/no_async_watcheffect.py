# Async watchEffect detection: an async callback breaks onCleanup registration

from __future__ import annotations

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor, call_arguments, callee_name

EFFECT_FUNCTIONS = frozenset({"watchEffect", "watchPostEffect", "watchSyncEffect"})

# "function" is the pre-0.21 grammar name for function expressions
_FUNCTION_TYPES = frozenset({"arrow_function", "function_expression", "function"})


def _is_async_function(node: TSNode) -> bool:
    if node.type not in _FUNCTION_TYPES:
        return False
    return any(child.type == "async" for child in node.children)


class NoAsyncWatchEffectRule(Rule):
    """Flags watchEffect()/watchPostEffect()/watchSyncEffect() with an async callback."""

    id = "no-async-watcheffect"
    name = "Async watchEffect"
    description = "Disallow async callback in watchEffect(), which prevents proper cleanup"
    messages = {
        "noAsync": (
            "Avoid async watchEffect callback, the cleanup function won't work as expected. "
            "Use a sync callback with async operations inside."
        ),
    }
    default_severity = "warning"
    category = "Correctness"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        def call_expression(node: TSNode) -> None:
            if callee_name(node) not in EFFECT_FUNCTIONS:
                return
            args = call_arguments(node)
            if args and _is_async_function(args[0]):
                context.report(args[0], "noAsync")

        return {"call_expression": call_expression}
