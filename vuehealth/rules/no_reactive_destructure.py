# Reactive destructure detection: destructuring reactive() loses reactivity

from __future__ import annotations

from tree_sitter import Node as TSNode

from vuehealth.rules.base import Rule, RuleContext, Visitor, callee_name


class NoReactiveDestructureRule(Rule):
    """Flags `const { a } = reactive({...})`; the bindings are plain snapshots."""

    id = "no-reactive-destructure"
    name = "Reactive destructure"
    description = "Disallow destructuring reactive() return value, which loses reactivity"
    messages = {
        "noDestructure": "Destructuring reactive() loses reactivity. Use toRefs() or access properties directly.",
    }
    default_severity = "error"
    category = "Correctness"

    def create(self, context: RuleContext) -> dict[str, Visitor]:
        def variable_declarator(node: TSNode) -> None:
            pattern = node.child_by_field_name("name")
            init = node.child_by_field_name("value")
            if pattern is None or pattern.type != "object_pattern" or init is None:
                return
            if callee_name(init) == "reactive":
                context.report(node, "noDestructure")

        return {"variable_declarator": variable_declarator}
